# trueodd/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .clients.trueodd import TrueOddClient
from .core.config import get_settings
from .core.logging import configure_logging
from .routers import health, screen
from .services.screen import PredictionScreen


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)
    client = TrueOddClient.from_settings(settings)
    app.state.screen = PredictionScreen(client, default_league=settings.default_league)
    await app.state.screen.start()
    try:
        yield
    finally:
        await client.aclose()


app = FastAPI(title="TrueOdd Screen API", version="0.1.0", lifespan=lifespan)

# Routers
app.include_router(health.router)
app.include_router(screen.router)

@app.get("/")
def root():
    return {"service": "trueodd-screen"}
