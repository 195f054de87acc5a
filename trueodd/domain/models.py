from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

Scope = Optional[str]   # None = global catalog, otherwise a league code


class League(BaseModel):
    code: str
    display_name: str


class Match(BaseModel):
    """Match row as served by GET /partidas; only the team names matter here."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    home: str = Field(alias="timeCasa")
    away: str = Field(alias="timeFora")


class CatalogStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    EMPTY = "empty"
    READY = "ready"


class TeamUniverse(BaseModel):
    model_config = ConfigDict(frozen=True)

    scope: Scope = None
    teams: Tuple[str, ...] = ()

    @classmethod
    def build(cls, scope: Scope, names: Iterable[str]) -> "TeamUniverse":
        """Sorted ascending, deduplicated, blank names dropped."""
        unique = {n for n in names if n and n.strip()}
        return cls(scope=scope, teams=tuple(sorted(unique)))

    def __len__(self) -> int:
        return len(self.teams)

    def __contains__(self, name: object) -> bool:
        return name in self.teams


class PredictionResult(BaseModel):
    """Analysis returned by GET /partidas/prever."""
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    expected_value: float = Field(alias="valorEsperado", description="Signed EV percentage")
    true_probability_home: float = Field(alias="probabilidadeCasa", description="Percentage")
    fair_odd_home: float = Field(alias="oddJustaCasa")
    fair_odd_away: float = Field(alias="oddJustaFora")
    quoted_odd_home: float = Field(alias="oddCasaApostas")


class SyncOutcome(BaseModel):
    league: str
    records_updated: int = Field(..., ge=0)


class Verdict(str, Enum):
    VALUE_BET = "value_bet"
    MARGINAL_VALUE = "marginal_value"
    NO_BET = "no_bet"
