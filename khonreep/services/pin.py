# khonreep/services/pin.py
from __future__ import annotations

import logging
import random
import time
import uuid
from dataclasses import dataclass
from typing import Callable, List, Optional

from starlette.concurrency import run_in_threadpool

from khonreep.db.store import LocationStore, StoreError
from khonreep.models.location import INCIDENT_TYPES, Location, LocationIn
from khonreep.services.geolocation import DevicePosition, GeolocationError
from khonreep.services.ip_lookup import UNKNOWN_IP, IPLookupClient
from khonreep.services.markers import MarkerStyle, category_for

log = logging.getLogger(__name__)

SAVE_FAILED_MESSAGE = "Could not save location."

# how far (px) a tap burst may drift from the button center
BURST_SPREAD = 40


@dataclass(frozen=True)
class PinOption:
    type: str
    label: str
    style: MarkerStyle


PIN_OPTIONS = tuple(
    PinOption(type=t, label=category_for(t).label, style=category_for(t).style)
    for t in INCIDENT_TYPES
)


@dataclass
class TapBurst:
    x: int
    y: int
    expires_at: float


class PinAlert(Exception):
    """A failure the user must be told about; the submission was aborted."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def temporary_id() -> str:
    return f"tmp-{uuid.uuid4().hex}"


class PinTab:
    """
    Incident picker. Each tap: position -> IP -> insert -> optimistic append.
    The steps run strictly in that order; separate taps are not serialized.
    """

    def __init__(
        self,
        store: LocationStore,
        ip_lookup: IPLookupClient,
        locations: List[Location],
        *,
        feedback_ms: int = 2000,
        clock: Callable[[], float] = time.monotonic,
        id_factory: Callable[[], str] = temporary_id,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.ip_lookup = ip_lookup
        self.locations = locations
        self.feedback_seconds = feedback_ms / 1000.0
        self.clock = clock
        self.id_factory = id_factory
        self.rng = rng or random.Random()

        self.tap_count = 0
        self._bursts: List[TapBurst] = []
        self._success_until: Optional[float] = None

    # ---------------- transient feedback ----------------

    @property
    def pin_success(self) -> bool:
        return self._success_until is not None and self.clock() < self._success_until

    @property
    def bursts(self) -> List[TapBurst]:
        now = self.clock()
        self._bursts = [b for b in self._bursts if b.expires_at > now]
        return list(self._bursts)

    def _tap(self) -> None:
        self.tap_count += 1
        now = self.clock()
        self._bursts = [b for b in self._bursts if b.expires_at > now]
        self._bursts.append(
            TapBurst(
                x=self.rng.randint(-BURST_SPREAD, BURST_SPREAD),
                y=self.rng.randint(-BURST_SPREAD, BURST_SPREAD),
                expires_at=now + self.feedback_seconds,
            )
        )

    # ---------------- submission ----------------

    async def submit(self, incident_type: str, position: DevicePosition, user_agent: str) -> Location:
        """
        Run one pin submission and return the optimistic local record.
        Raises PinAlert when the user has to be told the pin was not saved.
        """
        self._tap()

        try:
            coords = await position.current_position()
        except GeolocationError as e:
            log.info("Pin aborted, geolocation failed (%s)", e.code)
            raise PinAlert(str(e), status_code=400) from e

        ip = await self.ip_lookup.get_ip_address()

        record = LocationIn(
            type=incident_type,
            latitude=coords.latitude,
            longitude=coords.longitude,
            user_agent=user_agent,
            ip_address=ip or UNKNOWN_IP,
        )

        try:
            await run_in_threadpool(self.store.insert, record)
        except StoreError as e:
            log.error("Store insert error: %s", e)
            raise PinAlert(SAVE_FAILED_MESSAGE, status_code=502) from e

        local = Location(id=self.id_factory(), status="pending", **record.model_dump())
        self.locations.append(local)
        self._success_until = self.clock() + self.feedback_seconds
        return local
