# khonreep/services/session.py
from __future__ import annotations

import logging
import secrets
from collections import OrderedDict
from typing import Any, Callable, Dict, List, Optional

from khonreep.config import Settings
from khonreep.db.store import LocationStore
from khonreep.models.location import Location
from khonreep.services.ip_lookup import IPLookupClient
from khonreep.services.map_view import MapView
from khonreep.services.pin import PinTab
from khonreep.services.tabs import TabCoordinator

log = logging.getLogger(__name__)


class ReporterSession:
    """Everything one browser tab sees: local list, both tabs, the map."""

    def __init__(self, session_id: str, settings: Settings, store: LocationStore, ip_lookup: IPLookupClient):
        self.id = session_id
        self.locations: List[Location] = []
        self.map_view = MapView(settings)
        self.pin = PinTab(store, ip_lookup, self.locations, feedback_ms=settings.pin_feedback_ms)
        self.tabs = TabCoordinator(store, self.locations, self.map_view)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "active_tab": self.tabs.active,
            "loading": self.tabs.loading,
            "pin_success": self.pin.pin_success,
            "tap_count": self.pin.tap_count,
            "taps": [{"x": b.x, "y": b.y} for b in self.pin.bursts],
            "locations": len(self.locations),
            "map_mounted": self.map_view.mounted,
        }


SessionFactory = Callable[[str], ReporterSession]


class SessionRegistry:
    """
    Live sessions, least recently used first. Past `max_sessions` the
    oldest one is dropped and its map released.
    """

    def __init__(self, factory: SessionFactory, *, max_sessions: int = 1000):
        self._factory = factory
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, ReporterSession]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: Optional[str]) -> Optional[ReporterSession]:
        if not session_id:
            return None
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
        return session

    def create(self) -> ReporterSession:
        session_id = secrets.token_urlsafe(24)
        session = self._factory(session_id)
        self._sessions[session_id] = session

        while len(self._sessions) > self.max_sessions:
            old_id, old = self._sessions.popitem(last=False)
            old.map_view.unmount()
            log.debug("Evicted session %s", old_id[:6])
        return session
