# khonreep/db/store.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Dict, List, Protocol

from khonreep.models.location import Location, LocationIn

if TYPE_CHECKING:
    from khonreep.config import Settings


class StoreError(RuntimeError):
    pass


class StoreReadError(StoreError):
    pass


class StoreWriteError(StoreError):
    pass


class LocationStore(Protocol):
    """Read-all / insert-one access to the `locations` table."""

    def select(self) -> List[Location]:
        ...

    def insert(self, record: LocationIn) -> Location:
        ...


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class MemoryLocationStore:
    """Process-local store for development (STORE_BACKEND=memory)."""

    def __init__(self) -> None:
        self._rows: Dict[str, Location] = {}

    def select(self) -> List[Location]:
        return list(self._rows.values())

    def insert(self, record: LocationIn) -> Location:
        now = _now_iso()
        row = Location(
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            **record.model_dump(),
        )
        self._rows[row.id] = row
        return row


def build_store(settings: "Settings") -> LocationStore:
    if settings.store_backend == "memory":
        return MemoryLocationStore()

    from khonreep.db.dynamo import DynamoLocationStore
    return DynamoLocationStore.from_settings(settings)
