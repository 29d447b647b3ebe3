# khonreep/services/geolocation.py
from __future__ import annotations

from typing import NamedTuple, Optional

from khonreep.models.location import PinRequest

UNSUPPORTED_MESSAGE = "Geolocation is not supported by your browser."
UNAVAILABLE_MESSAGE = "Unable to retrieve location."


class Coordinates(NamedTuple):
    latitude: float
    longitude: float


class GeolocationError(RuntimeError):
    def __init__(self, code: str):
        self.code = code
        super().__init__(UNSUPPORTED_MESSAGE if code == "unsupported" else UNAVAILABLE_MESSAGE)


class DevicePosition:
    """
    One-shot position query. The browser runs getCurrentPosition and sends
    us either the fix or the error code; this wraps that outcome so the
    Pin flow can await it like any other position source.
    """

    def __init__(
        self,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        error: Optional[str] = None,
    ):
        self.latitude = latitude
        self.longitude = longitude
        self.error = error

    @classmethod
    def from_request(cls, req: PinRequest) -> "DevicePosition":
        return cls(req.latitude, req.longitude, req.geolocation_error)

    async def current_position(self) -> Coordinates:
        if self.error:
            raise GeolocationError(self.error)
        if self.latitude is None or self.longitude is None:
            raise GeolocationError("position_unavailable")
        return Coordinates(self.latitude, self.longitude)
