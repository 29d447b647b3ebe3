# khonreep/config.py
from __future__ import annotations

import os
from functools import lru_cache
from typing import List, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# --- Load .env early so os.getenv works everywhere ---
load_dotenv()


IPIFY_URL = "https://api64.ipify.org?format=json"
OSM_TILES = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
OSM_ATTRIBUTION = "&copy; OpenStreetMap contributors"


class Settings(BaseModel):
    # HTTP surface
    api_prefix: str = ""
    cors_origins: List[str] = Field(default_factory=list)
    session_cookie: str = "khonreep_session"
    max_sessions: int = Field(1000, ge=1)

    # Remote store
    store_backend: str = Field("dynamodb", pattern=r"^(dynamodb|memory)$")
    aws_region: str = "eu-north-1"
    locations_table: str = "locations"

    # IP lookup
    ip_lookup_url: str = IPIFY_URL
    ip_lookup_timeout: float = 5.0

    # Pin tab
    pin_feedback_ms: int = Field(2000, ge=0)

    # Map view
    tile_url: str = OSM_TILES
    tile_attribution: str = OSM_ATTRIBUTION
    default_center: Tuple[float, float] = (13.7563, 100.5018)  # Bangkok
    default_zoom: int = 6
    fit_padding: float = Field(0.1, ge=0.0)

    log_level: str = "INFO"


def _normalize_prefix(raw: str) -> str:
    # "/api" style, no trailing slash so paths look like /api/pin (not //pin)
    raw = raw.strip()
    if not raw:
        return ""
    if not raw.startswith("/"):
        raw = "/" + raw
    return raw.rstrip("/")


def _split_csv(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [o.strip() for o in raw.split(",") if o.strip()]


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw not in (None, "") else default


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read settings from the environment once per process."""
    center_lat = _float_env("DEFAULT_CENTER_LAT", 13.7563)
    center_lng = _float_env("DEFAULT_CENTER_LNG", 100.5018)
    return Settings(
        api_prefix=_normalize_prefix(os.getenv("API_PREFIX", "")),
        cors_origins=_split_csv(os.getenv("CORS_ORIGINS")),
        session_cookie=os.getenv("SESSION_COOKIE", "khonreep_session"),
        max_sessions=int(os.getenv("MAX_SESSIONS", "1000")),
        store_backend=os.getenv("STORE_BACKEND", "dynamodb").strip().lower(),
        aws_region=os.getenv("AWS_REGION", "eu-north-1"),
        locations_table=os.getenv("LOCATIONS_TABLE", "locations"),
        ip_lookup_url=os.getenv("IP_LOOKUP_URL", IPIFY_URL),
        ip_lookup_timeout=_float_env("IP_LOOKUP_TIMEOUT", 5.0),
        pin_feedback_ms=int(os.getenv("PIN_FEEDBACK_MS", "2000")),
        tile_url=os.getenv("TILE_URL", OSM_TILES),
        tile_attribution=os.getenv("TILE_ATTRIBUTION", OSM_ATTRIBUTION),
        default_center=(center_lat, center_lng),
        default_zoom=int(os.getenv("DEFAULT_ZOOM", "6")),
        fit_padding=_float_env("MAP_FIT_PADDING", 0.1),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
