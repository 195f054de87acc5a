from __future__ import annotations
import asyncio
import logging
from typing import Any, Mapping, Optional
import httpx

DEFAULT_TIMEOUT = 20.0
RETRYABLE_STATUS = (429, 502, 503, 504)

logger = logging.getLogger(__name__)


class AsyncHttpClient:
    """httpx async client with optional retries/backoff. Non-2xx raises httpx.HTTPStatusError."""
    def __init__(self, base_url: str = "", *, timeout: float = DEFAULT_TIMEOUT,
                 retries: int = 0, backoff: float = 0.75,
                 headers: Optional[Mapping[str, str]] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self._retries = retries
        self._backoff = backoff
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=headers or {},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def request(self, method: str, url: str, *,
                      params: Optional[Mapping[str, Any]] = None) -> httpx.Response:
        last_exc = None
        for i in range(self._retries + 1):
            try:
                r = await self._http.request(method, url, params=params or {})
                if r.status_code in RETRYABLE_STATUS and i < self._retries:
                    # sleeping host / rate limit
                    raise httpx.HTTPStatusError("retryable", request=r.request, response=r)
                r.raise_for_status()
                return r
            except httpx.HTTPStatusError as e:
                last_exc = e
                if e.response.status_code not in RETRYABLE_STATUS or i == self._retries:
                    raise
            except httpx.TransportError as e:
                last_exc = e
                if i == self._retries:
                    raise
            delay = self._backoff * (2 ** i)
            logger.info("%s %s failed (%s), retrying in %.2fs", method, url, last_exc, delay)
            await asyncio.sleep(delay)
        assert last_exc is not None
        raise last_exc

    async def get(self, url: str, *, params: Optional[Mapping[str, Any]] = None) -> httpx.Response:
        return await self.request("GET", url, params=params)

    async def post(self, url: str, *, params: Optional[Mapping[str, Any]] = None) -> httpx.Response:
        return await self.request("POST", url, params=params)
