# trueodd/services/sync.py
from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional, Set

from ..clients.trueodd import TrueOddClient, TrueOddError
from ..core.config import league_name
from ..domain.models import SyncOutcome

logger = logging.getLogger(__name__)

SyncHook = Callable[[str], Awaitable[object]]


class LeagueSync:
    """Re-ingests a league's matches upstream, one in-flight sync per league."""

    def __init__(self, client: TrueOddClient, on_synced: Optional[SyncHook] = None):
        self._client = client
        self._on_synced = on_synced
        self._in_flight: Set[str] = set()
        self.error: Optional[str] = None
        self.message: Optional[str] = None

    @property
    def in_flight(self) -> frozenset:
        return frozenset(self._in_flight)

    def syncing(self, code: Optional[str]) -> bool:
        return code is not None and code in self._in_flight

    def clear_messages(self) -> None:
        self.error = None
        self.message = None

    async def sync(self, code: Optional[str]) -> Optional[SyncOutcome]:
        if code is None:
            return None
        if code in self._in_flight:
            logger.info("sync for %s already running; ignored", code)
            return None

        name = league_name(code)
        self._in_flight.add(code)
        self.clear_messages()
        try:
            records = await self._client.sync_league(code)
        except TrueOddError as e:
            logger.warning("sync for %s failed: %s", code, e)
            self.error = f"Sync of {name} failed. Try again."
            return None
        finally:
            self._in_flight.discard(code)

        outcome = SyncOutcome(league=code, records_updated=len(records))
        self.message = f"{outcome.records_updated} matches updated for {name}."
        logger.info("synced %s: %d record(s)", code, outcome.records_updated)
        if self._on_synced is not None:
            await self._on_synced(code)
        return outcome
