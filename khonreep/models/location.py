from datetime import datetime
from typing import Literal, Optional, get_args

from pydantic import BaseModel, Field

IncidentType = Literal[
    "SIDEWALK_OR_MOTORBIKE",
    "ZEBRA_CROSSING_MISUSE",
    "WRONG_DIRECTION",
    "TRAFFIC_LIGHT_BLINDNESS",
]
INCIDENT_TYPES: tuple = get_args(IncidentType)

GeolocationErrorCode = Literal["permission_denied", "position_unavailable", "timeout", "unsupported"]


# Record as assembled by the Pin flow (the store assigns id + timestamps)
class LocationIn(BaseModel):
    type: IncidentType = Field(..., description="Incident category chosen by the user")
    latitude: float = Field(..., description="Latitude (decimal degrees)")
    longitude: float = Field(..., description="Longitude (decimal degrees)")
    user_agent: str = Field("", description="Device user-agent string")
    ip_address: str = Field("unknown", description="Public IP or 'unknown'")


class Location(BaseModel):
    id: str
    # Stored rows are not re-validated against the enum. Unknown or missing
    # values (rows from before categories existed) get the default marker.
    type: Optional[str] = None
    latitude: float
    longitude: float
    user_agent: Optional[str] = ""
    ip_address: Optional[str] = "unknown"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    status: Literal["pending", "confirmed"] = "confirmed"


# Payload coming FROM the browser on every pin tap
class PinRequest(BaseModel):
    type: IncidentType
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    geolocation_error: Optional[GeolocationErrorCode] = Field(
        None, description="Set by the client when its position query failed"
    )
