from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from roonarr.adapters.lidarr.schema import LidarrStatus
from roonarr.domain.model import ResolvedAlbum
from roonarr.domain.processing import ProcessingSummary
from roonarr.ui import cli

if TYPE_CHECKING:
    from pathlib import Path


def test_status_reads_cache_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ROONARR_CACHE_FILE", str(tmp_path / "cache.json"))

    cli.main(["status"])


def test_check_exits_non_zero_when_target_unreachable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "check_target", lambda: None)

    with pytest.raises(SystemExit) as exc:
        cli.main(["check"])

    assert exc.value.code == 1


def test_check_succeeds_when_target_reachable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "check_target", lambda: LidarrStatus(version="2.5.3"))

    cli.main(["check"])


def test_retry_passes_force_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[bool] = []

    def fake_retry(*, force: bool = False) -> ProcessingSummary:
        seen.append(force)
        return ProcessingSummary()

    monkeypatch.setattr(cli, "retry_pending_albums", fake_retry)

    cli.main(["retry", "--force"])
    cli.main(["retry"])

    assert seen == [True, False]


def test_resolve_forwards_title_and_artist(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[tuple[str, str]] = []

    def fake_resolve(title: str, artist: str) -> ResolvedAlbum | None:
        seen.append((title, artist))
        return None

    monkeypatch.setattr(cli, "resolve_album", fake_resolve)

    cli.main(["resolve", "Abbey Road", "The Beatles"])

    assert seen == [("Abbey Road", "The Beatles")]


def test_missing_configuration_exits_with_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LIDARR_API_KEY", raising=False)

    with pytest.raises(SystemExit) as exc:
        cli.main(["retry"])

    assert exc.value.code == 1


def test_unknown_command_is_rejected() -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(["explode"])

    assert exc.value.code == 2


def test_run_starts_service_loop(monkeypatch: pytest.MonkeyPatch) -> None:
    started: list[bool] = []
    monkeypatch.setattr(cli, "run_service", lambda: started.append(True))

    cli.main(["run"])

    assert started == [True]
