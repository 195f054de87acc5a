# trueodd/services/screen.py
from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import BaseModel

from ..clients.trueodd import TrueOddClient
from ..core.config import LEAGUES, ensure_league
from ..domain.models import CatalogStatus, League, PredictionResult, Scope, SyncOutcome, TeamUniverse
from .catalog import TeamCatalog
from .form import FormValidationError, PredictionForm, is_submittable, reconcile, validate
from .predict import PredictionController
from .sync import LeagueSync
from .verdict import PredictionView

logger = logging.getLogger(__name__)


class ScreenState(BaseModel):
    leagues: List[League]
    league: Optional[str]
    catalog_status: CatalogStatus
    teams: List[str]
    needs_sync: bool
    online: bool
    form: PredictionForm
    submittable: bool
    problems: List[str]
    loading: bool
    syncing: bool
    analyzing: bool
    can_sync: bool
    error: Optional[str] = None
    message: Optional[str] = None
    result: Optional[PredictionView] = None


class PredictionScreen:
    """
    Everything the prediction screen owns: league selection, the team catalog,
    the form, the sync and analysis controllers. Callers drive it one action at
    a time from a single event loop.
    """

    def __init__(self, client: TrueOddClient, *, default_league: Scope = None):
        self.client = client
        self.catalog = TeamCatalog(client)
        self.syncer = LeagueSync(client, on_synced=self._after_sync)
        self.predictor = PredictionController(client)
        self.form = PredictionForm()
        self.league: Scope = ensure_league(default_league)

    # ------------ lock policy ------------
    def lock_reasons(self) -> List[str]:
        reasons: List[str] = []
        status = self.catalog.status
        if status is CatalogStatus.LOADING:
            reasons.append("Teams are still loading")
        elif status is CatalogStatus.EMPTY:
            reasons.append("No teams loaded; sync the league first")
        elif status is CatalogStatus.UNINITIALIZED:
            reasons.append("Teams have not been loaded")
        if self.syncer.syncing(self.league):
            reasons.append("League sync in progress")
        if self.predictor.analyzing:
            reasons.append("Analysis in progress")
        return reasons

    @property
    def locked(self) -> bool:
        return bool(self.lock_reasons())

    def submittable(self) -> bool:
        return is_submittable(self.form, self.catalog.universe, locked=self.locked)

    def can_sync(self) -> bool:
        return self.league is not None and not self.syncer.syncing(self.league) and not self.catalog.loading

    # ------------ actions ------------
    async def _load(self, scope: Scope) -> Optional[TeamUniverse]:
        if scope != self.catalog.scope:
            self.form = self.form.model_copy(update={"home": None, "away": None})
        universe = await self.catalog.load(scope)
        if universe is not None:
            self.form = reconcile(self.form, universe)
        return universe

    async def _after_sync(self, code: str) -> None:
        if code != self.league:
            logger.info("sync for %s finished after leaving it; not reloading", code)
            return
        await self._load(code)

    async def start(self) -> Optional[TeamUniverse]:
        return await self._load(self.league)

    async def select_league(self, code: Scope) -> Optional[TeamUniverse]:
        self.league = ensure_league(code)
        self.predictor.invalidate()
        self.predictor.clear()
        self.syncer.clear_messages()
        return await self._load(self.league)

    async def reload(self) -> Optional[TeamUniverse]:
        return await self._load(self.league)

    async def sync(self) -> Optional[SyncOutcome]:
        return await self.syncer.sync(self.league)

    def update_form(self, *, home: Optional[str] = None, away: Optional[str] = None,
                    odd: Optional[str] = None) -> PredictionForm:
        changes = {k: v for k, v in {"home": home, "away": away, "odd": odd}.items() if v is not None}
        updated = self.form.model_copy(update=changes)
        if updated != self.form:
            # an in-flight answer would describe the old inputs
            self.predictor.invalidate()
        self.form = updated
        return updated

    async def analyze(self) -> Optional[PredictionResult]:
        if self.predictor.analyzing:
            return None
        locks = [r for r in self.lock_reasons() if r != "Analysis in progress"]
        if locks:
            self.predictor.clear()
            raise FormValidationError(locks + validate(self.form, self.catalog.universe))
        return await self.predictor.predict(self.form, self.catalog.universe)

    # ------------ snapshot ------------
    def state(self) -> ScreenState:
        result = self.predictor.result
        error = self.catalog.error or self.syncer.error or self.predictor.error
        return ScreenState(
            leagues=[League(code=c, display_name=n) for c, n in LEAGUES.items()],
            league=self.league,
            catalog_status=self.catalog.status,
            teams=list(self.catalog.universe.teams),
            needs_sync=self.catalog.needs_sync,
            online=not self.catalog.loading and self.catalog.error is None
            and self.catalog.status is not CatalogStatus.UNINITIALIZED,
            form=self.form,
            submittable=self.submittable(),
            problems=self.lock_reasons() + validate(self.form, self.catalog.universe),
            loading=self.catalog.loading,
            syncing=self.syncer.syncing(self.league),
            analyzing=self.predictor.analyzing,
            can_sync=self.can_sync(),
            error=error,
            message=self.syncer.message or self.catalog.empty_message,
            result=PredictionView.from_result(result) if result is not None else None,
        )
