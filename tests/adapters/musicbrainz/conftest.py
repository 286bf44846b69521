from __future__ import annotations

from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from roonarr.adapters.http_resilience import ResilientClient
from roonarr.adapters.musicbrainz import MusicBrainzClient
from roonarr.config.http_resilience import ResilienceConfig  # noqa: TC001
from roonarr.config.musicbrainz import get_musicbrainz_config
from tests.support.musicbrainz import Handler  # noqa: TC001


@pytest.fixture(autouse=True)
def _musicbrainz_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MUSICBRAINZ_APP_NAME", "roonarr-tests")
    monkeypatch.setenv("MUSICBRAINZ_CONTACT", "tests@example.com")


@pytest.fixture
def make_client() -> Callable[[Handler], MusicBrainzClient]:
    def build(handler: Handler) -> MusicBrainzClient:
        def factory(resilience: ResilienceConfig) -> ResilientClient:
            return ResilientClient(resilience, transport=httpx.MockTransport(handler))

        return MusicBrainzClient(config=get_musicbrainz_config(), client_factory=factory)

    return build
