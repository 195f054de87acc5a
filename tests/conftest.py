import asyncio
from typing import Dict, List, Optional

import httpx
import pytest
import pytest_asyncio

from trueodd.clients.trueodd import TrueOddClient

PREDICTION = {
    "valorEsperado": 7.2,
    "probabilidadeCasa": 58.1,
    "oddJustaCasa": 1.72,
    "oddJustaFora": 4.35,
    "oddCasaApostas": 1.85,
}


class FakeTrueOdd:
    """In-memory stand-in for the remote service, served through httpx.MockTransport."""

    def __init__(self):
        self.matches: List[dict] = []
        self.teams: Dict[str, List[str]] = {}
        self.synced: Dict[str, List[str]] = {}     # teams a league holds after a sync
        self.prediction: dict = dict(PREDICTION)
        self.fail: Dict[str, int] = {}             # path -> status code
        self.gates: Dict[str, asyncio.Event] = {}  # path -> event to wait on
        self.requests: List[httpx.Request] = []

    def hold(self, path: str) -> asyncio.Event:
        self.gates[path] = asyncio.Event()
        return self.gates[path]

    def calls(self, path: str, method: Optional[str] = None) -> List[httpx.Request]:
        return [r for r in self.requests
                if r.url.path.endswith(path) and (method is None or r.method == method)]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        gate = self.gates.get(path)
        if gate is not None:
            await gate.wait()
        if path in self.fail:
            return httpx.Response(self.fail[path], text="upstream unavailable")

        liga = request.url.params.get("liga")
        if path == "/partidas":
            return httpx.Response(200, json=self.matches)
        if path == "/partidas/times":
            return httpx.Response(200, json=self.teams.get(liga, []))
        if path == "/partidas/sincronizar" and request.method == "POST":
            names = self.synced.get(liga, [])
            self.teams[liga] = list(names)
            records = [{"liga": liga, "n": i} for i in range(len(names) * 5)]
            return httpx.Response(200, json=records)
        if path == "/partidas/prever":
            return httpx.Response(200, json=self.prediction)
        return httpx.Response(404, json={"error": "not found"})


@pytest.fixture
def service() -> FakeTrueOdd:
    return FakeTrueOdd()


@pytest_asyncio.fixture
async def client(service):
    c = TrueOddClient("http://trueodd.test/api", transport=httpx.MockTransport(service.handler))
    yield c
    await c.aclose()
