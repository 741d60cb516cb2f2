"""
Ranking providers: ordered lists of artist / track names.

- LastFmProvider: country charts (geo.*) and world charts (chart.*)
- SpotifyProvider: the user's personal top artists / tracks
- StaticProvider: both interfaces served from an in-memory mapping
  (offline mode, demos)

Every failed call raises ProviderError carrying the status description.
"""
import json
import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

from musicvenn.config import KINDS, LABELS, LASTFM_API_URL, SPOTIFY_API_URL
from musicvenn.errors import ProviderError

logger = logging.getLogger(__name__)

PERSONAL, COUNTRY, WORLD = LABELS
ARTISTS, TRACKS = KINDS


def _names(payload: Any, *path: str) -> List[str]:
    """Follow `path` into a JSON payload and collect each entry's "name"."""
    node = payload
    try:
        for key in path:
            node = node[key]
        return [str(entry["name"]) for entry in node]
    except (KeyError, TypeError) as exc:
        raise ProviderError("malformed response", f"Unexpected response shape at {'.'.join(path)}: {exc!r}") from exc


async def _get_json(client: httpx.AsyncClient, url: str, **kwargs) -> Any:
    logger.debug("GET %s %s", url, kwargs.get("params", ""))
    try:
        response = await client.get(url, **kwargs)
    except httpx.HTTPError as exc:
        raise ProviderError(type(exc).__name__, f"Request to {url} failed: {exc}") from exc

    if not response.is_success:
        status = response.reason_phrase or str(response.status_code)
        raise ProviderError(status, f"Error fetching {url}: {status}")
    try:
        return response.json()
    except ValueError as exc:
        raise ProviderError("invalid JSON", f"Response from {url} is not JSON.") from exc


class LastFmProvider:

    def __init__(
        self,
        api_key: Optional[str],
        client: Optional[httpx.AsyncClient] = None,
        base_url: str = LASTFM_API_URL,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=None)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _call(self, method: str, **params) -> Any:
        if not self.api_key:
            raise ProviderError("missing API key", "Last.fm API key is not configured (LASTFM_API_KEY).")
        query = {"method": method, "api_key": self.api_key, "format": "json"}
        query.update({k: v for k, v in params.items() if v is not None})

        payload = await _get_json(self._client, self.base_url, params=query)
        # Last.fm reports some failures with HTTP 200 and an error body
        if isinstance(payload, dict) and "error" in payload:
            raise ProviderError(str(payload.get("message", payload["error"])))
        return payload

    async def fetch_top_artists(self, country: str, limit: int, page: int) -> List[str]:
        payload = await self._call("geo.gettopartists", country=country, limit=limit, page=page)
        return _names(payload, "topartists", "artist")

    async def fetch_top_tracks(self, country: str, limit: int, page: int) -> List[str]:
        payload = await self._call("geo.gettoptracks", country=country, limit=limit, page=page)
        return _names(payload, "tracks", "track")

    async def fetch_world_artists(self, limit: int, page: int) -> List[str]:
        payload = await self._call("chart.gettopartists", limit=limit, page=page)
        return _names(payload, "artists", "artist")

    async def fetch_world_tracks(self, limit: int, page: int) -> List[str]:
        payload = await self._call("chart.gettoptracks", limit=limit, page=page)
        return _names(payload, "tracks", "track")


class SpotifyProvider:

    def __init__(self, client: Optional[httpx.AsyncClient] = None, base_url: str = SPOTIFY_API_URL):
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=None)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _top(self, what: str, token: str) -> List[str]:
        payload = await _get_json(
            self._client,
            f"{self.base_url}/me/top/{what}",
            headers={"Authorization": f"Bearer {token}"},
        )
        return _names(payload, "items")

    async def fetch_personal_artists(self, token: str) -> List[str]:
        return await self._top("artists", token)

    async def fetch_personal_tracks(self, token: str) -> List[str]:
        return await self._top("tracks", token)


class StaticProvider:
    """
    Serves fixed lists through the Last.fm and Spotify provider interfaces.

    `data` maps kind -> label -> names, e.g.
    {"Artists": {"Personal": [...], "Country": [...], "World": [...]}}.
    A "Country" entry may itself map country name -> names. A mapping
    without kind keys is used for both kinds.
    """

    def __init__(self, data: Mapping[str, Any]):
        if not any(kind in data for kind in KINDS):
            data = {kind: data for kind in KINDS}
        self._data: Dict[str, Mapping[str, Any]] = {kind: data.get(kind, {}) for kind in KINDS}

    @classmethod
    def from_file(cls, path: str) -> "StaticProvider":
        with open(path, "r", encoding="utf-8") as f:
            return cls(json.load(f))

    def _list(self, kind: str, label: str, limit: Optional[int] = None, country: Optional[str] = None) -> List[str]:
        entry = self._data[kind].get(label, [])
        if isinstance(entry, Mapping):
            if country not in entry:
                raise ProviderError("Not Found", f"No {kind.lower()} for country {country!r}.")
            entry = entry[country]
        names = [str(name) for name in entry]
        return names[:limit] if limit is not None else names

    async def fetch_top_artists(self, country: str, limit: int, page: int) -> List[str]:
        return self._list(ARTISTS, COUNTRY, limit, country)

    async def fetch_top_tracks(self, country: str, limit: int, page: int) -> List[str]:
        return self._list(TRACKS, COUNTRY, limit, country)

    async def fetch_world_artists(self, limit: int, page: int) -> List[str]:
        return self._list(ARTISTS, WORLD, limit)

    async def fetch_world_tracks(self, limit: int, page: int) -> List[str]:
        return self._list(TRACKS, WORLD, limit)

    async def fetch_personal_artists(self, token: str) -> List[str]:
        return self._list(ARTISTS, PERSONAL)

    async def fetch_personal_tracks(self, token: str) -> List[str]:
        return self._list(TRACKS, PERSONAL)

    def countries(self) -> List[str]:
        """Country names with their own lists, in file order."""
        names: List[str] = []
        for kind in KINDS:
            entry = self._data[kind].get(COUNTRY)
            if isinstance(entry, Mapping):
                names.extend(name for name in entry if name not in names)
        return names

    async def aclose(self) -> None:
        pass

