# trueodd/services/verdict.py
from __future__ import annotations

import math

from pydantic import BaseModel

from ..domain.models import PredictionResult, Verdict

VALUE_BET_THRESHOLD = 5.0   # EV percent; strictly above is a value bet

LABELS = {
    Verdict.VALUE_BET: "Value bet",
    Verdict.MARGINAL_VALUE: "Tight margin",
    Verdict.NO_BET: "Do not bet",
}


def classify(expected_value: float) -> Verdict:
    """
    ev > 5       -> VALUE_BET
    0 < ev <= 5  -> MARGINAL_VALUE
    ev <= 0      -> NO_BET (NaN included)
    """
    if math.isnan(expected_value):
        return Verdict.NO_BET
    if expected_value > VALUE_BET_THRESHOLD:
        return Verdict.VALUE_BET
    if expected_value > 0:
        return Verdict.MARGINAL_VALUE
    return Verdict.NO_BET


def label(verdict: Verdict) -> str:
    return LABELS[verdict]


def format_ev(expected_value: float) -> str:
    sign = "+" if expected_value > 0 else ""
    return f"{sign}{expected_value}%"


class PredictionView(BaseModel):
    verdict: Verdict
    label: str
    expected_value: float
    expected_value_text: str
    true_probability_home: str
    fair_odd_home: float
    fair_odd_away: float
    quoted_odd_home: float
    beats_fair_price: bool

    @classmethod
    def from_result(cls, result: PredictionResult) -> "PredictionView":
        verdict = classify(result.expected_value)
        return cls(
            verdict=verdict,
            label=label(verdict),
            expected_value=result.expected_value,
            expected_value_text=format_ev(result.expected_value),
            true_probability_home=f"{result.true_probability_home}%",
            fair_odd_home=result.fair_odd_home,
            fair_odd_away=result.fair_odd_away,
            quoted_odd_home=result.quoted_odd_home,
            beats_fair_price=result.expected_value > 0,
        )
