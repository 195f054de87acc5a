# trueodd/routers/screen.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict

from ..core.config import UnknownLeagueError
from ..deps import get_screen
from ..services.form import FormValidationError
from ..services.screen import PredictionScreen, ScreenState

router = APIRouter(prefix="/screen", tags=["screen"])


class _Strict(BaseModel):
    model_config = ConfigDict(extra="forbid")


class LeagueSelection(_Strict):
    code: Optional[str] = None   # null -> all leagues


class FormPatch(_Strict):
    home: Optional[str] = None
    away: Optional[str] = None
    odd: Optional[str] = None


@router.get("", response_model=ScreenState, summary="Current screen state")
async def screen_state(screen: PredictionScreen = Depends(get_screen)):
    return screen.state()


@router.post("/league", response_model=ScreenState, summary="Select a league (null for all)")
async def select_league(body: LeagueSelection, screen: PredictionScreen = Depends(get_screen)):
    try:
        await screen.select_league(body.code)
    except UnknownLeagueError as e:
        raise HTTPException(
            status_code=422,
            detail={"message": "Invalid league", "input": e.code},
        )
    return screen.state()


@router.post("/reload", response_model=ScreenState, summary="Reload teams for the current scope")
async def reload(screen: PredictionScreen = Depends(get_screen)):
    await screen.reload()
    return screen.state()


@router.post("/sync", response_model=ScreenState, summary="Re-ingest matches for the selected league")
async def sync(screen: PredictionScreen = Depends(get_screen)):
    if screen.league is None:
        # nothing selected: no-op
        return screen.state()
    if screen.syncer.syncing(screen.league):
        raise HTTPException(status_code=409, detail={"message": "Sync already in progress", "league": screen.league})
    await screen.sync()
    return screen.state()


@router.patch("/form", response_model=ScreenState, summary="Edit teams and odd")
async def update_form(body: FormPatch, screen: PredictionScreen = Depends(get_screen)):
    screen.update_form(**body.model_dump(exclude_none=True))
    return screen.state()


@router.post("/analyze", response_model=ScreenState, summary="Analyze the selected match")
async def analyze(screen: PredictionScreen = Depends(get_screen)):
    if screen.predictor.analyzing:
        raise HTTPException(status_code=409, detail={"message": "Analysis already in progress"})
    try:
        await screen.analyze()
    except FormValidationError as e:
        raise HTTPException(
            status_code=422,
            detail={"message": "Form is not submittable", "problems": e.problems},
        )
    return screen.state()
