from decimal import Decimal

import pytest


from khonreep.config import Settings
from khonreep.db.dynamo import DynamoLocationStore
from khonreep.db.store import MemoryLocationStore, StoreReadError, StoreWriteError, build_store
from khonreep.models.location import LocationIn
from tests.fakes import StubTable


def _row(loc_id, lat="13.7563", lng="100.5018"):
    return {
        "id": loc_id,
        "type": "WRONG_DIRECTION",
        "latitude": Decimal(lat),
        "longitude": Decimal(lng),
        "user_agent": "ua",
        "ip_address": "unknown",
        "created_at": "2026-10-01T08:00:00+00:00",
        "updated_at": "2026-10-01T08:00:00+00:00",
    }


def test_select_paginates_and_converts_decimals():
    table = StubTable(pages=[
        {"Items": [_row("a")], "LastEvaluatedKey": {"id": "a"}},
        {"Items": [_row("b", lat="14.5")]},
    ])
    rows = DynamoLocationStore(table).select()

    assert [r.id for r in rows] == ["a", "b"]
    assert rows[1].latitude == 14.5
    assert isinstance(rows[0].longitude, float)
    assert rows[0].status == "confirmed"
    assert "ExclusiveStartKey" not in table.scans[0]
    assert table.scans[1]["ExclusiveStartKey"] == {"id": "a"}


def test_insert_assigns_id_and_timestamps():
    table = StubTable()
    record = LocationIn(type="ZEBRA_CROSSING_MISUSE", latitude=13.5, longitude=100.25, user_agent="ua", ip_address="1.2.3.4")

    stored = DynamoLocationStore(table).insert(record)

    item = table.puts[0]["Item"]
    assert item["id"] == stored.id
    assert item["latitude"] == Decimal("13.5")
    assert item["type"] == "ZEBRA_CROSSING_MISUSE"
    assert stored.created_at is not None and stored.created_at == stored.updated_at


def test_errors_are_typed():
    table = StubTable()
    table.fail = True
    store = DynamoLocationStore(table)

    with pytest.raises(StoreReadError, match="not allowed"):
        store.select()
    with pytest.raises(StoreWriteError):
        store.insert(LocationIn(type="WRONG_DIRECTION", latitude=1.0, longitude=2.0))


def test_memory_store_round_trip():
    store = build_store(Settings(store_backend="memory"))
    assert isinstance(store, MemoryLocationStore)

    stored = store.insert(LocationIn(type="WRONG_DIRECTION", latitude=1.0, longitude=2.0))
    assert store.select() == [stored]


def test_rows_from_before_categories_still_load():
    legacy = {"id": "old-1", "latitude": Decimal("13.7"), "longitude": Decimal("100.5"), "user_agent": "ua"}
    rows = DynamoLocationStore(StubTable(pages=[{"Items": [legacy, _row("new-1")]}])).select()

    assert [r.id for r in rows] == ["old-1", "new-1"]
    assert rows[0].type is None
    assert rows[0].ip_address == "unknown"


def test_null_attributes_are_tolerated():
    row = {**_row("a"), "user_agent": None, "ip_address": None}
    rows = DynamoLocationStore(StubTable(pages=[{"Items": [row]}])).select()
    assert rows[0].user_agent is None


def test_unreadable_row_is_a_read_error():
    broken = {"id": "x", "type": "WRONG_DIRECTION", "user_agent": "ua"}
    with pytest.raises(StoreReadError, match="Malformed"):
        DynamoLocationStore(StubTable(pages=[{"Items": [broken]}])).select()
