from __future__ import annotations

from pathlib import Path

import pytest

from roonarr.config import (
    ConfigurationError,
    MissingConfigurationError,
    env_int,
    env_str,
    get_lidarr_config,
    get_musicbrainz_config,
    get_storage_config,
    require_env_var,
    require_env_vars,
)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_raises_when_any_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_VAR", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_VAR"])

    assert "MISSING_VAR" in str(exc.value)
    assert exc.value.names == ("MISSING_VAR",)


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_optional_env_helpers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_INT", " 7 ")
    monkeypatch.setenv("EXAMPLE_BLANK", "")
    monkeypatch.setenv("EXAMPLE_BAD_INT", "seven")

    assert env_int("EXAMPLE_INT", 1) == 7
    assert env_int("EXAMPLE_BLANK", 1) == 1
    assert env_str("EXAMPLE_BLANK", "fallback") == "fallback"
    with pytest.raises(ConfigurationError, match="EXAMPLE_BAD_INT"):
        env_int("EXAMPLE_BAD_INT", 1)


def test_lidarr_config_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LIDARR_API_KEY", raising=False)

    with pytest.raises(MissingConfigurationError, match="LIDARR_API_KEY"):
        get_lidarr_config()


def test_lidarr_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LIDARR_URL", "http://lidarr.local:8686/")
    monkeypatch.setenv("LIDARR_API_KEY", "abc123")
    monkeypatch.setenv("LIDARR_ROOT_FOLDER", "/srv/music")
    monkeypatch.setenv("LIDARR_QUALITY_PROFILE", "4")
    monkeypatch.delenv("LIDARR_METADATA_PROFILE", raising=False)

    config = get_lidarr_config()

    assert config.base_url == "http://lidarr.local:8686"
    assert config.resilience.base_url == "http://lidarr.local:8686/api/v1/"
    assert config.resilience.timeout_seconds == 10.0
    assert config.resilience.retry.attempts == 3
    assert config.resilience.retry.build().is_retryable_status_code(404)
    assert config.resilience.default_headers is not None
    assert config.resilience.default_headers["X-Api-Key"] == "abc123"
    assert config.root_folder_path == "/srv/music"
    assert config.quality_profile_id == 4
    assert config.metadata_profile_id == 1


def test_musicbrainz_config_identifies_client(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MUSICBRAINZ_APP_NAME", "my-sync")
    monkeypatch.setenv("MUSICBRAINZ_CONTACT", "me@example.com")

    config = get_musicbrainz_config()

    assert config.resilience.timeout_seconds == 8.0
    assert config.resilience.retry.attempts == 1
    assert config.resilience.ratelimit is not None
    assert config.resilience.ratelimit.max_calls == 1
    assert config.resilience.default_headers is not None
    user_agent = config.resilience.default_headers["User-Agent"]
    assert user_agent.startswith("my-sync/")
    assert user_agent.endswith("( me@example.com )")


def test_storage_config_prefers_explicit_cache_file(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.setenv("ROONARR_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("ROONARR_CACHE_FILE", str(tmp_path / "elsewhere" / "cache.json"))

    path = get_storage_config().cache_path()

    assert path == (tmp_path / "elsewhere" / "cache.json").resolve()
    assert path.parent.is_dir()


def test_storage_config_uses_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ROONARR_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("ROONARR_CACHE_FILE", raising=False)

    path = get_storage_config().cache_path()

    assert path == (tmp_path / "data").resolve() / "album_cache.json"
    assert Path(path.parent).is_dir()
