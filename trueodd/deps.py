# trueodd/deps.py
from fastapi import HTTPException, Request

from .services.screen import PredictionScreen


def get_screen(request: Request) -> PredictionScreen:
    """The single screen context created at startup (see main.lifespan)."""
    screen = getattr(request.app.state, "screen", None)
    if screen is None:
        raise HTTPException(status_code=503, detail="screen not initialised")
    return screen
