# trueodd/core/config.py
from __future__ import annotations

from functools import lru_cache
from typing import Dict, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://trueodd.onrender.com/api"


# ----- App settings (env-driven) -----
class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TRUEODD_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    api_url: str = DEFAULT_API_URL
    http_timeout: float = 20.0
    http_retries: int = 0          # the screen retries only when the user asks
    retry_backoff: float = 0.75
    log_level: str = "INFO"
    default_league: Optional[str] = None  # None -> global catalog on start


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# ----- Static league table (codes go to the service verbatim) -----
LEAGUES: Dict[str, str] = {
    "BSA": "Brasileirão Série A",
    "PL":  "Premier League",
    "CL":  "UEFA Champions League",
    "PD":  "La Liga",
    "SA":  "Serie A",
    "BL1": "Bundesliga",
    "FL1": "Ligue 1",
    "DED": "Eredivisie",
    "PPL": "Primeira Liga",
    "ELC": "Championship",
    "WC":  "FIFA World Cup",
    "EC":  "European Championship",
}


class UnknownLeagueError(ValueError):
    def __init__(self, code: str):
        super().__init__(f"Unknown league code '{code}'")
        self.code = code


def league_name(code: str) -> str:
    """Display name for a league code."""
    try:
        return LEAGUES[code]
    except KeyError:
        raise UnknownLeagueError(code) from None


def ensure_league(code: Optional[str]) -> Optional[str]:
    """Return the code unchanged when it is None (global) or a known league."""
    if code is not None and code not in LEAGUES:
        raise UnknownLeagueError(code)
    return code
