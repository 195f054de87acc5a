# trueodd/services/catalog.py
from __future__ import annotations

import logging
from typing import Optional

from ..clients.trueodd import TrueOddClient, TrueOddError
from ..core.config import league_name
from ..domain.models import CatalogStatus, Scope, TeamUniverse

logger = logging.getLogger(__name__)

LOAD_FAILED = "Could not load the teams. The server may be waking up; try again in a minute."


def scope_label(scope: Scope) -> str:
    return "all leagues" if scope is None else league_name(scope)


class TeamCatalog:
    """
    Selectable teams for one scope (global or a single league).

    Every load issues a new token; a response that is not for the latest token
    is dropped, so a slow answer for an old scope can never replace a newer one.
    """

    def __init__(self, client: TrueOddClient):
        self._client = client
        self._universe = TeamUniverse()
        self._status = CatalogStatus.UNINITIALIZED
        self._token = 0
        self.error: Optional[str] = None

    # ------------ state ------------
    @property
    def universe(self) -> TeamUniverse:
        return self._universe

    @property
    def status(self) -> CatalogStatus:
        return self._status

    @property
    def scope(self) -> Scope:
        return self._universe.scope

    @property
    def loading(self) -> bool:
        return self._status is CatalogStatus.LOADING

    @property
    def needs_sync(self) -> bool:
        return self._status is CatalogStatus.EMPTY

    @property
    def empty_message(self) -> Optional[str]:
        if not self.needs_sync:
            return None
        return f"No teams found for {scope_label(self.scope)}. Sync the league to load its matches."

    @staticmethod
    def _settled(universe: TeamUniverse, fetched: bool) -> CatalogStatus:
        if len(universe):
            return CatalogStatus.READY
        return CatalogStatus.EMPTY if fetched else CatalogStatus.UNINITIALIZED

    # ------------ loading ------------
    async def _fetch(self, scope: Scope) -> TeamUniverse:
        if scope is None:
            matches = await self._client.list_matches()
            names = [n for m in matches for n in (m.home, m.away)]
        else:
            names = await self._client.teams_for_league(scope)
        return TeamUniverse.build(scope, names)

    async def load(self, scope: Scope) -> Optional[TeamUniverse]:
        """Fetch the universe for `scope`; None when the load failed or was superseded."""
        self._token += 1
        token = self._token
        previous_status = self._status
        if scope != self._universe.scope:
            # never show another scope's teams while this one loads
            self._universe = TeamUniverse(scope=scope)
            previous_status = CatalogStatus.UNINITIALIZED
        self._status = CatalogStatus.LOADING
        self.error = None
        logger.debug("loading teams for %s (token %d)", scope_label(scope), token)

        try:
            universe = await self._fetch(scope)
        except TrueOddError as e:
            if token != self._token:
                logger.debug("dropping failed load for %s (token %d superseded)", scope_label(scope), token)
                return None
            logger.warning("team load for %s failed: %s", scope_label(scope), e)
            if previous_status is CatalogStatus.LOADING:
                previous_status = self._settled(self._universe, fetched=False)
            self._status = previous_status
            self.error = LOAD_FAILED
            return None

        if token != self._token:
            logger.debug("dropping stale teams for %s (token %d superseded)", scope_label(scope), token)
            return None

        self._universe = universe
        self._status = self._settled(universe, fetched=True)
        logger.info("loaded %d team(s) for %s", len(universe), scope_label(scope))
        return universe
