# trueodd/services/predict.py
from __future__ import annotations

import logging
from typing import Optional

from ..clients.trueodd import TrueOddClient, TrueOddError
from ..domain.models import PredictionResult, TeamUniverse
from .form import PredictionForm, ensure_valid

logger = logging.getLogger(__name__)

ANALYZE_FAILED = "Could not analyze the match. Try again."


class PredictionController:
    """Single-flight analysis requests; the latest request owns the result."""

    def __init__(self, client: TrueOddClient):
        self._client = client
        self._token = 0
        self._in_flight = False
        self.result: Optional[PredictionResult] = None
        self.error: Optional[str] = None

    @property
    def analyzing(self) -> bool:
        return self._in_flight

    def invalidate(self) -> None:
        """Drop the current result and whatever an in-flight request returns."""
        self._token += 1
        self.result = None

    def clear(self) -> None:
        self.result = None
        self.error = None

    async def predict(self, form: PredictionForm, universe: TeamUniverse) -> Optional[PredictionResult]:
        if self._in_flight:
            logger.info("analysis already running; ignored")
            return None
        try:
            odd = ensure_valid(form, universe)
        except ValueError:
            self.result = None
            raise

        self._token += 1
        token = self._token
        self._in_flight = True
        self.clear()
        try:
            result = await self._client.predict(form.home, form.away, odd)
        except TrueOddError as e:
            if token == self._token:
                logger.warning("analysis %s x %s failed: %s", form.home, form.away, e)
                self.result = None
                self.error = ANALYZE_FAILED
            return None
        finally:
            self._in_flight = False

        if token != self._token:
            logger.debug("dropping stale analysis for %s x %s", form.home, form.away)
            return None
        self.result = result
        logger.info("analysis %s x %s @ %s: EV %s", form.home, form.away, odd, result.expected_value)
        return result
