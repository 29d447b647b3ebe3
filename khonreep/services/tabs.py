# khonreep/services/tabs.py
from __future__ import annotations

import logging
from typing import List, Literal

from starlette.concurrency import run_in_threadpool

from khonreep.db.store import LocationStore, StoreError
from khonreep.models.location import Location
from khonreep.services.map_view import MapView

log = logging.getLogger(__name__)

Tab = Literal["pin", "map"]


class TabCoordinator:
    """
    pin <-> map toggle. Entering the map refetches everything and rebuilds
    the map; leaving it releases the surface. Re-activating the current tab
    does nothing.
    """

    def __init__(self, store: LocationStore, locations: List[Location], map_view: MapView):
        self.store = store
        self.locations = locations
        self.map_view = map_view
        self.active: Tab = "pin"
        self.loading = False

    async def activate(self, tab: Tab) -> None:
        if tab == self.active:
            return
        self.active = tab

        if tab == "map":
            await self._enter_map()
        else:
            self.map_view.unmount()

    async def _enter_map(self) -> None:
        # the map is not shown while loading, so it comes back as a fresh mount
        self.map_view.unmount()
        self.loading = True
        try:
            fetched = await run_in_threadpool(self.store.select)
        except StoreError as e:
            log.error("Error fetching locations: %s", e)
            fetched = []
        finally:
            self.loading = False

        # replace in place; the Pin tab appends to this same list
        self.locations[:] = fetched

        # the user may have switched back while the fetch was in flight
        if self.active != "map":
            return
        self.map_view.mount()
        self.map_view.render(self.locations)
