# khonreep/routes/session.py
from __future__ import annotations

from typing import List, Literal

from fastapi import APIRouter, Depends

from khonreep.models.location import Location
from khonreep.routes.deps import get_session
from khonreep.services.session import ReporterSession

router = APIRouter(tags=["session"])


@router.get("/session")
async def session_state(session: ReporterSession = Depends(get_session)):
    return session.snapshot()


@router.post("/tabs/{tab}")
async def activate_tab(tab: Literal["pin", "map"], session: ReporterSession = Depends(get_session)):
    """Switch tabs. Entering the map always refetches every location."""
    await session.tabs.activate(tab)
    return session.snapshot()


@router.get("/locations", response_model=List[Location])
async def local_locations(session: ReporterSession = Depends(get_session)):
    return session.locations
