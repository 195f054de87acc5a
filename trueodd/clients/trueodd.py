# trueodd/clients/trueodd.py
from __future__ import annotations

from typing import Any, List, Optional, Mapping

import httpx
from pydantic import TypeAdapter, ValidationError

from ..core.config import Settings
from ..core.http import AsyncHttpClient
from ..domain.models import Match, PredictionResult

_MATCHES = TypeAdapter(List[Match])
_NAMES = TypeAdapter(List[str])


class TrueOddError(RuntimeError):
    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TrueOddClient:
    """
    Async wrapper over the TrueOdd analysis service.

      - matches:  GET  /partidas                        -> [{timeCasa, timeFora, ...}]
      - teams:    GET  /partidas/times?liga={code}      -> ["Ajax", ...]
      - sync:     POST /partidas/sincronizar?liga={code} -> [match record, ...]
      - predict:  GET  /partidas/prever?casa=&fora=&odd= -> {valorEsperado, ...}

    Every failure (transport, non-2xx, undecodable body) surfaces as TrueOddError.
    """

    # ------------ lifecycle ------------
    def __init__(self, base_url: str, *, timeout: float = 20.0, retries: int = 0,
                 backoff: float = 0.75, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._http = AsyncHttpClient(
            base_url.rstrip("/"),
            timeout=timeout,
            retries=retries,
            backoff=backoff,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kw: Any) -> "TrueOddClient":
        return cls(
            settings.api_url,
            timeout=settings.http_timeout,
            retries=settings.http_retries,
            backoff=settings.retry_backoff,
            **kw,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "TrueOddClient":
        return self

    async def __aexit__(self, *_exc) -> None:
        await self.aclose()

    # ------------ low-level helpers ------------
    async def _call(self, method: str, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        try:
            resp = await self._http.request(method, path, params=params)
        except httpx.HTTPStatusError as e:
            body = ""
            try:
                body = e.response.text
            except Exception:
                pass
            raise TrueOddError(
                f"{method} {path} -> {e.response.status_code}: {body}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise TrueOddError(f"{method} {path} failed: {e!r}") from e
        try:
            return resp.json()
        except ValueError as e:
            raise TrueOddError(f"{method} {path}: response is not JSON") from e

    @staticmethod
    def _parse(adapter_or_model: Any, payload: Any, what: str) -> Any:
        try:
            if isinstance(adapter_or_model, TypeAdapter):
                return adapter_or_model.validate_python(payload)
            return adapter_or_model.model_validate(payload)
        except ValidationError as e:
            raise TrueOddError(f"unexpected {what} payload: {e.error_count()} error(s)") from e

    # ------------ catalog ------------
    async def list_matches(self) -> List[Match]:
        payload = await self._call("GET", "/partidas")
        return self._parse(_MATCHES, payload, "matches")

    async def teams_for_league(self, code: str) -> List[str]:
        payload = await self._call("GET", "/partidas/times", {"liga": code})
        return self._parse(_NAMES, payload, "teams")

    # ------------ sync ------------
    async def sync_league(self, code: str) -> List[Any]:
        """Re-ingest upstream matches for a league; returns the synced records."""
        payload = await self._call("POST", "/partidas/sincronizar", {"liga": code})
        if not isinstance(payload, list):
            raise TrueOddError(f"unexpected sync payload: {type(payload).__name__}")
        return payload

    # ------------ prediction ------------
    async def predict(self, home: str, away: str, odd: float) -> PredictionResult:
        payload = await self._call("GET", "/partidas/prever", {"casa": home, "fora": away, "odd": odd})
        return self._parse(PredictionResult, payload, "prediction")
