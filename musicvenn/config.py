"""
Settings and constants.

Constants describe the fixed shape of the diagram (the three labels, the two
kinds of ranking) and the provider endpoints. `load_settings` reads the
per-user values (API keys, initial control values) from the environment.
"""
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional, Tuple

from musicvenn.errors import ConfigError

# ---------------------------------------------------------------------------
# Diagram shape
# ---------------------------------------------------------------------------

LABELS: Tuple[str, ...] = ("Personal", "Country", "World")
KINDS: Tuple[str, ...] = ("Artists", "Tracks")

DEFAULT_KIND = "Artists"
DEFAULT_COUNTRY = "United States"
COUNT_CHOICES: Tuple[int, ...] = (5, 10, 15, 20)
DEFAULT_COUNT = 5

COUNTRIES: Tuple[str, ...] = (
    "United States",
    "United Kingdom",
    "Germany",
    "France",
    "Sweden",
    "Brazil",
    "Japan",
    "Australia",
)

# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------

FETCH_LIMIT = 20
FETCH_PAGE = 2

LASTFM_API_URL = "http://ws.audioscrobbler.com/2.0/"
SPOTIFY_API_URL = "https://api.spotify.com/v1"
SPOTIFY_AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_SCOPE = "user-read-private user-read-email user-top-read"
DEFAULT_REDIRECT_URI = "http://localhost:5173/callback"
DEFAULT_TOKEN_LIFETIME = 3600


@dataclass(frozen=True)
class Settings:
    lastfm_api_key: Optional[str] = None
    spotify_client_id: Optional[str] = None
    redirect_uri: str = DEFAULT_REDIRECT_URI
    country: str = DEFAULT_COUNTRY
    count: int = DEFAULT_COUNT
    kind: str = DEFAULT_KIND
    fetch_limit: int = FETCH_LIMIT
    fetch_page: int = FETCH_PAGE


def _parse_count(raw) -> int:
    try:
        count = int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"count must be an integer, got {raw!r}.") from None
    if count <= 0:
        raise ConfigError(f"count must be positive, got {count}.")
    return count


def _parse_kind(raw: str) -> str:
    for kind in KINDS:
        if kind.lower() == str(raw).lower():
            return kind
    raise ConfigError(f"kind must be one of {', '.join(KINDS)}, got {raw!r}.")


def load_settings(env: Optional[Mapping[str, str]] = None, **overrides) -> Settings:
    """
    Build Settings from environment variables, then apply non-None overrides.

    Recognised variables: LASTFM_API_KEY, SPOTIFY_CLIENT_ID,
    SPOTIFY_REDIRECT_URI, MUSICVENN_COUNTRY, MUSICVENN_COUNT, MUSICVENN_KIND.
    """
    if env is None:
        env = os.environ

    settings = Settings(
        lastfm_api_key=env.get("LASTFM_API_KEY") or None,
        spotify_client_id=env.get("SPOTIFY_CLIENT_ID") or None,
        redirect_uri=env.get("SPOTIFY_REDIRECT_URI", DEFAULT_REDIRECT_URI),
        country=env.get("MUSICVENN_COUNTRY", DEFAULT_COUNTRY),
        count=_parse_count(env.get("MUSICVENN_COUNT", DEFAULT_COUNT)),
        kind=_parse_kind(env.get("MUSICVENN_KIND", DEFAULT_KIND)),
    )

    overrides = {k: v for k, v in overrides.items() if v is not None}
    if "count" in overrides:
        overrides["count"] = _parse_count(overrides["count"])
    if "kind" in overrides:
        overrides["kind"] = _parse_kind(overrides["kind"])
    return replace(settings, **overrides)
