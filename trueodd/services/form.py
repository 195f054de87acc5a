# trueodd/services/form.py
from __future__ import annotations

import math
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from ..domain.models import TeamUniverse


class PredictionForm(BaseModel):
    model_config = ConfigDict(frozen=True)

    home: Optional[str] = None
    away: Optional[str] = None
    odd: str = ""   # kept as typed


class FormValidationError(ValueError):
    def __init__(self, problems: List[str]):
        super().__init__("; ".join(problems))
        self.problems = problems


def parse_odd(text: Optional[str]) -> Optional[float]:
    """
    Decimal odd as typed by the user, or None when it is not a usable price.
    An odd of 1 or less means certainty (or a broken quote) and is rejected.
    """
    if text is None:
        return None
    s = str(text).strip().replace(",", ".")
    if not s:
        return None
    try:
        value = float(s)
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 1:
        return None
    return value


def validate(form: PredictionForm, universe: TeamUniverse) -> List[str]:
    """Human-readable problems that block submission (empty when valid)."""
    problems: List[str] = []
    if len(universe) == 0:
        problems.append("No teams loaded")
    if not form.home:
        problems.append("Select the home team")
    elif form.home not in universe:
        problems.append(f"'{form.home}' is not in the current team list")
    if not form.away:
        problems.append("Select the away team")
    elif form.away not in universe:
        problems.append(f"'{form.away}' is not in the current team list")
    if form.home and form.home == form.away:
        problems.append("Home and away teams must differ")
    if not form.odd.strip():
        problems.append("Enter the bookmaker odd")
    elif parse_odd(form.odd) is None:
        problems.append("The odd must be a number greater than 1")
    return problems


def ensure_valid(form: PredictionForm, universe: TeamUniverse) -> float:
    """Raise FormValidationError unless the form can be sent; return the parsed odd."""
    problems = validate(form, universe)
    if problems:
        raise FormValidationError(problems)
    odd = parse_odd(form.odd)
    assert odd is not None
    return odd


def is_submittable(form: PredictionForm, universe: TeamUniverse, *, locked: bool = False) -> bool:
    return not locked and not validate(form, universe)


def reconcile(form: PredictionForm, universe: TeamUniverse) -> PredictionForm:
    """
    Align the team selection with a freshly loaded universe.

    A valid, distinct pair that still belongs to the universe is kept; anything
    else is replaced by the first two teams, or cleared when fewer than two exist.
    The odd is left alone.
    """
    home, away = form.home, form.away
    if home and away and home != away and home in universe and away in universe:
        return form
    if len(universe) >= 2:
        return form.model_copy(update={"home": universe.teams[0], "away": universe.teams[1]})
    return form.model_copy(update={"home": None, "away": None})
