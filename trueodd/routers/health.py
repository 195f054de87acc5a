from fastapi import APIRouter

from ..core.config import LEAGUES
from ..domain.models import League

router = APIRouter(tags=["health"])

@router.get("/health")
def health():
    return {"status": "ok"}

@router.get("/leagues", response_model=list[League], summary="Static league table")
def leagues():
    return [League(code=c, display_name=n) for c, n in LEAGUES.items()]
