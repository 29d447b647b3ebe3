# khonreep/routes/pin.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Header, HTTPException

from khonreep.models.location import Location, PinRequest
from khonreep.routes.deps import get_session
from khonreep.services.geolocation import DevicePosition
from khonreep.services.pin import PIN_OPTIONS, PinAlert
from khonreep.services.session import ReporterSession

router = APIRouter(prefix="/pin", tags=["pin"])


@router.get("/options")
def pin_options():
    return [
        {"type": o.type, "label": o.label, "color": o.style.color, "border": o.style.border}
        for o in PIN_OPTIONS
    ]


@router.post("", status_code=201, response_model=Location)
async def drop_pin(
    data: PinRequest,
    user_agent: str = Header("", alias="User-Agent"),
    session: ReporterSession = Depends(get_session),
):
    """
    Accept one tap (incident type + the browser's geolocation outcome),
    store it, and return the optimistic local record.
    Failures come back as the alert text in `detail`.
    """
    try:
        return await session.pin.submit(data.type, DevicePosition.from_request(data), user_agent)
    except PinAlert as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
