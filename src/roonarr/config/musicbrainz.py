"""MusicBrainz configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from roonarr import __version__

from .env import env_str
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_MUSICBRAINZ_BASE_URL = "https://musicbrainz.org/ws/2/"
MUSICBRAINZ_TIMEOUT_SECONDS = 8.0
DEFAULT_APP_NAME = "roonarr"
DEFAULT_CONTACT = "roonarr@example.com"


@dataclass(frozen=True, slots=True)
class MusicBrainzConfig:
    resilience: ResilienceConfig


def get_musicbrainz_config() -> MusicBrainzConfig:
    app_name = env_str("MUSICBRAINZ_APP_NAME", DEFAULT_APP_NAME)
    contact = env_str("MUSICBRAINZ_CONTACT", DEFAULT_CONTACT)
    user_agent = f"{app_name}/{__version__} ( {contact} )"

    # a failed lookup is a normal "not found yet" outcome, so no request retries
    resilience = ResilienceConfig(
        name="musicbrainz",
        base_url=DEFAULT_MUSICBRAINZ_BASE_URL,
        timeout_seconds=MUSICBRAINZ_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
        retry=RetryPolicy(total=0),
        default_headers={"User-Agent": user_agent, "Accept": "application/json"},
    )

    return MusicBrainzConfig(resilience=resilience)
