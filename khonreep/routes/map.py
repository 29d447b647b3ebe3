# khonreep/routes/map.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse

from khonreep.routes.deps import get_session
from khonreep.services.geolocation import Coordinates
from khonreep.services.session import ReporterSession

router = APIRouter(tags=["map"])


@router.get("/map", response_class=HTMLResponse)
async def map_page(
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Viewer latitude"),
    lng: Optional[float] = Query(None, ge=-180, le=180, description="Viewer longitude"),
    session: ReporterSession = Depends(get_session),
):
    """
    Leaflet page for the current local list. The viewer fix is optional;
    without it the map simply has no "you are here" marker.
    """
    if session.tabs.active != "map":
        raise HTTPException(status_code=409, detail="Map tab is not active.")

    view = session.map_view
    view.mount()
    # pins still in flight when the tab switched land in the list later
    view.render(session.locations)

    viewer = Coordinates(lat, lng) if lat is not None and lng is not None else None
    view.place_viewer(viewer)
    return view.to_html()
