"""
Ranking data behind the three lists.

RankingStore keeps the last-known-good personal, country and world lists for
both kinds (artists, tracks), plus the user's control values (kind, country,
display count). Provider failures are logged and leave the previous lists in
place. The country lists are refreshed through a LatestHandle: a newer
country selection supersedes an older one still in flight, and everything
that needs the country lists awaits `country_ready()` first.
"""
import asyncio
import logging
from typing import Any, Awaitable, Dict, List, Optional

from musicvenn.config import DEFAULT_COUNT, DEFAULT_COUNTRY, DEFAULT_KIND, KINDS, LABELS, Settings
from musicvenn.errors import ConfigError, ProviderError
from musicvenn.handles import LatestHandle
from musicvenn.regions import NamedCollection

logger = logging.getLogger(__name__)

PERSONAL, COUNTRY, WORLD = LABELS
ARTISTS, TRACKS = KINDS


async def _gather_settled(*calls: Awaitable[Any]) -> List[Any]:
    """Await all calls; re-raise the first failure after every call settled."""
    results = await asyncio.gather(*calls, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)


class RankingStore:

    def __init__(
        self,
        charts: Any,
        personal: Optional[Any] = None,
        auth: Optional[Any] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or Settings()
        self.charts = charts
        self.personal = personal
        self.auth = auth

        self.kind = settings.kind
        self.country = settings.country
        self.count = settings.count
        self.fetch_limit = settings.fetch_limit
        self.fetch_page = settings.fetch_page

        self._lists: Dict[str, Dict[str, List[str]]] = {
            label: {kind: [] for kind in KINDS} for label in LABELS
        }
        self.loaded_country: Optional[str] = None
        self._country_refresh: LatestHandle[bool] = LatestHandle("country")

    # ---- Controls ----------------------------------------------------------

    def set_kind(self, kind: str) -> None:
        if kind not in KINDS:
            raise ConfigError(f"kind must be one of {', '.join(KINDS)}, got {kind!r}.")
        self.kind = kind

    def set_count(self, count: int) -> None:
        count = int(count)
        if count <= 0:
            raise ConfigError(f"count must be positive, got {count}.")
        self.count = count

    def reset_controls(self) -> int:
        """Back to the default kind, count and country; returns the refresh id."""
        self.kind = DEFAULT_KIND
        self.count = DEFAULT_COUNT
        return self.refresh_country(DEFAULT_COUNTRY)

    def list_titles(self) -> Dict[str, str]:
        return {
            PERSONAL: f"Your Top {self.kind}",
            COUNTRY: f"Top {self.kind} in {self.country}",
            WORLD: f"World Top {self.kind}",
        }

    # ---- Loading -----------------------------------------------------------

    async def _fetch_kinds(
        self, source: str, artists: Awaitable[List[str]], tracks: Awaitable[List[str]]
    ) -> Dict[str, List[str]]:
        """
        Fetch both kinds concurrently and return those that arrived. Each
        ProviderError is logged on its own; anything else propagates.
        """
        results = await asyncio.gather(artists, tracks, return_exceptions=True)
        fetched: Dict[str, List[str]] = {}
        for kind, result in zip(KINDS, results):
            if isinstance(result, ProviderError):
                logger.error("Error fetching %s %s: %s", source, kind.lower(), result)
            elif isinstance(result, BaseException):
                raise result
            else:
                fetched[kind] = list(result)
        return fetched

    def _commit(self, label: str, fetched: Dict[str, List[str]]) -> bool:
        """Store the kinds that arrived; True when none is missing."""
        self._lists[label].update(fetched)
        return len(fetched) == len(KINDS)

    async def load_personal(self) -> bool:
        """
        Fetch the user's top artists and tracks. Raises
        ReauthenticationRequired when the user has to log in again.
        """
        if self.personal is None:
            logger.warning("No personal ranking provider configured; personal lists stay empty.")
            return False

        token = await self.auth.get_valid_access_token() if self.auth is not None else ""
        fetched = await self._fetch_kinds(
            "personal top",
            self.personal.fetch_personal_artists(token),
            self.personal.fetch_personal_tracks(token),
        )
        return self._commit(PERSONAL, fetched)

    async def load_world(self) -> bool:
        fetched = await self._fetch_kinds(
            "world top",
            self.charts.fetch_world_artists(self.fetch_limit, self.fetch_page),
            self.charts.fetch_world_tracks(self.fetch_limit, self.fetch_page),
        )
        return self._commit(WORLD, fetched)

    def refresh_country(self, country: str) -> int:
        """
        Start fetching `country`'s lists and make it the current country
        handle. Must be called from a running event loop.
        """
        self.country = country
        request_id = self._country_refresh.next_request_id()
        self._country_refresh.submit(self._fetch_country(country, request_id), request_id)
        return request_id

    async def _fetch_country(self, country: str, request_id: int) -> bool:
        fetched = await self._fetch_kinds(
            f"{country} top",
            self.charts.fetch_top_artists(country, self.fetch_limit, self.fetch_page),
            self.charts.fetch_top_tracks(country, self.fetch_limit, self.fetch_page),
        )

        if not self._country_refresh.is_current(request_id):
            logger.debug("Discarding superseded country data for %s (request %d).", country, request_id)
            return False
        if not fetched:
            return False

        complete = self._commit(COUNTRY, fetched)
        self.loaded_country = country
        logger.info("Loaded country data for %s (%s).", country, ", ".join(k.lower() for k in fetched))
        return complete

    async def country_ready(self) -> Optional[bool]:
        return await self._country_refresh.wait()

    async def load_all(self) -> None:
        """Initial load: personal, world and the current country together."""
        self.refresh_country(self.country)
        await _gather_settled(self.load_personal(), self.load_world(), self.country_ready())

    # ---- Views ---------------------------------------------------------------

    def current(self, label: str) -> List[str]:
        """`label`'s list for the current kind, truncated to the display count."""
        names = self._lists[label][self.kind]
        return names[: min(self.count, len(names))]

    async def collections(self) -> List[NamedCollection]:
        await self.country_ready()
        return [NamedCollection(label, tuple(self.current(label))) for label in LABELS]
