"""Property store behaviour in local mode."""
from __future__ import annotations

import json

import pytest

from estate.data.properties import BUILT_IN_PROPERTIES
from estate.schemas.properties import Property, PropertyAvailability, PropertyMedia
from estate.services.local_storage import LocalStorage
from estate.services.property_backends import (
    CUSTOM_PROPERTIES_STORAGE_KEY,
    LocalPropertyBackend,
    PropertyPersistenceError,
    decode_custom_properties,
    encode_custom_properties,
)
from estate.services.property_store import PropertyStore, merge_properties

SLOW_POLL = 3600.0

BUILT_IN_IDS = [record.id for record in BUILT_IN_PROPERTIES]


def _marina_loft(**overrides) -> Property:
    values = {
        "id": "marina-loft",
        "name": "Marina Loft",
        "neighborhood": "Dubai Marina",
        "bedrooms": 2,
        "bathrooms": 2,
        "sqft": 1400,
        "price": "AED 3,200,000",
        "labels": ["Sea View", "Sea View"],
        "amenities": ["Pool"],
        "features": ["Balcony"],
        "gallery_images": [PropertyMedia(url="data:image/jpeg;base64,AAAA", title="Living room")],
        "availability": PropertyAvailability(type="date", date="2026-12-01"),
        "created_at": "2026-10-01T09:00:00.000Z",
        "updated_at": "2026-10-01T09:00:00.000Z",
    }
    values.update(overrides)
    return Property(**values)


def test_snapshot_without_custom_records_lists_built_ins(local_store):
    snapshot = local_store.get_snapshot()

    assert [record.id for record in snapshot] == BUILT_IN_IDS
    assert {record.source for record in snapshot} == {"initial"}


def test_merge_shadows_built_in_with_custom_record():
    override = BUILT_IN_PROPERTIES[1].model_copy(update={"name": "Palm Residence (renovated)", "labels": []})
    extra = _marina_loft()

    merged = merge_properties([extra, override], BUILT_IN_PROPERTIES)

    assert [record.id for record in merged] == [
        "marina-loft",
        "palm-residence",
        "sky-tower-penthouse",
        "emirates-hills-villa",
    ]
    palm = [record for record in merged if record.id == "palm-residence"]
    assert len(palm) == 1
    assert palm[0] == override.with_source("custom")
    assert palm[0].labels == []


@pytest.mark.asyncio
async def test_upsert_then_find_returns_custom_record(local_store):
    record = _marina_loft(source="initial")

    await local_store.upsert(record)

    assert local_store.find_by_id("marina-loft") == record.with_source("custom")
    assert local_store.get_snapshot()[0].id == "marina-loft"


@pytest.mark.asyncio
async def test_upsert_does_not_persist_source(local_store, storage_path):
    await local_store.upsert(_marina_loft(source="custom"))

    stored = json.loads(LocalStorage(storage_path).get_item(CUSTOM_PROPERTIES_STORAGE_KEY))

    assert stored[0]["id"] == "marina-loft"
    assert "source" not in stored[0]
    assert stored[0]["galleryImages"][0]["title"] == "Living room"


@pytest.mark.asyncio
async def test_upsert_replaces_existing_custom_record_and_moves_it_first(local_store):
    await local_store.upsert(_marina_loft())
    await local_store.upsert(_marina_loft(id="creek-view", name="Creek View"))
    await local_store.upsert(_marina_loft(name="Marina Loft II", amenities=[]))

    custom = [record for record in local_store.get_snapshot() if record.source == "custom"]

    assert [record.id for record in custom] == ["marina-loft", "creek-view"]
    assert custom[0].name == "Marina Loft II"
    assert custom[0].amenities == []


def test_find_by_id_missing_returns_none(local_store):
    assert local_store.find_by_id("does-not-exist") is None


@pytest.mark.asyncio
async def test_remove_custom_only_record(local_store):
    await local_store.upsert(_marina_loft())

    await local_store.remove("marina-loft")

    assert local_store.find_by_id("marina-loft") is None


@pytest.mark.asyncio
async def test_remove_shadowing_record_restores_built_in(local_store):
    built_in = BUILT_IN_PROPERTIES[0]
    await local_store.upsert(built_in.model_copy(update={"name": "Renamed"}))
    assert local_store.find_by_id(built_in.id).source == "custom"

    await local_store.remove(built_in.id)

    restored = local_store.find_by_id(built_in.id)
    assert restored == built_in.with_source("initial")


@pytest.mark.asyncio
async def test_remove_built_in_only_id_is_a_noop(local_store, storage_path):
    await local_store.remove("palm-residence")

    assert local_store.find_by_id("palm-residence").source == "initial"
    assert json.loads(LocalStorage(storage_path).get_item(CUSTOM_PROPERTIES_STORAGE_KEY)) == []


def test_custom_records_survive_storage_encoding():
    records = [_marina_loft(), _marina_loft(id="creek-view", visible=False, availability=None)]

    decoded = decode_custom_properties(encode_custom_properties(records))

    assert decoded == records


def test_corrupt_storage_value_yields_built_ins_only(local_store, storage_path):
    LocalStorage(storage_path).set_item(CUSTOM_PROPERTIES_STORAGE_KEY, "[{not json")

    snapshot = local_store.get_snapshot()

    assert [record.id for record in snapshot] == BUILT_IN_IDS


def test_non_array_storage_value_yields_built_ins_only(local_store, storage_path):
    LocalStorage(storage_path).set_item(CUSTOM_PROPERTIES_STORAGE_KEY, json.dumps({"id": "x"}))

    assert [record.id for record in local_store.get_snapshot()] == BUILT_IN_IDS


def test_malformed_entries_are_skipped(local_store, storage_path):
    payload = [{"id": "good", "name": "Good"}, {"name": "missing id"}, {"id": "bad", "name": "Bad", "bedrooms": -1}]
    LocalStorage(storage_path).set_item(CUSTOM_PROPERTIES_STORAGE_KEY, json.dumps(payload))

    custom_ids = [record.id for record in local_store.get_snapshot() if record.source == "custom"]

    assert custom_ids == ["good"]


@pytest.mark.asyncio
async def test_hiding_built_in_penthouse(local_store):
    penthouse = local_store.find_by_id("sky-tower-penthouse")

    await local_store.upsert(penthouse.model_copy(update={"visible": False}))

    matches = [record for record in local_store.get_snapshot() if record.id == "sky-tower-penthouse"]
    assert len(matches) == 1
    assert matches[0].visible is False
    assert matches[0].source == "custom"


@pytest.mark.asyncio
async def test_subscribers_notified_after_local_writes(local_store):
    calls: list[int] = []
    unsubscribe = local_store.subscribe(lambda: calls.append(1))

    await local_store.upsert(_marina_loft())
    await local_store.remove("marina-loft")
    assert len(calls) == 2

    unsubscribe()
    unsubscribe()
    await local_store.upsert(_marina_loft())
    assert len(calls) == 2
    assert not local_store.backend.change_feed.running

    await local_store.close()


@pytest.mark.asyncio
async def test_failing_listener_does_not_block_others(local_store):
    calls: list[str] = []

    def broken() -> None:
        raise RuntimeError("view crashed")

    local_store.subscribe(broken)
    local_store.subscribe(lambda: calls.append("ok"))

    await local_store.upsert(_marina_loft())

    assert calls == ["ok"]
    await local_store.close()


@pytest.mark.asyncio
async def test_second_store_sees_writes_through_shared_file(storage_path):
    tab_a = PropertyStore(LocalPropertyBackend(LocalStorage(storage_path), poll_interval_seconds=SLOW_POLL))
    tab_b = PropertyStore(LocalPropertyBackend(LocalStorage(storage_path), poll_interval_seconds=SLOW_POLL))
    calls: list[int] = []
    tab_b.subscribe(lambda: calls.append(1))

    await tab_a.upsert(_marina_loft())
    changed = await tab_b.backend.change_feed.check()

    assert changed is True
    assert calls == [1]
    assert tab_b.find_by_id("marina-loft").source == "custom"
    event = tab_b.backend.change_feed.last_event
    assert event.key == CUSTOM_PROPERTIES_STORAGE_KEY
    assert event.old_value is None

    await tab_a.close()
    await tab_b.close()


@pytest.mark.asyncio
async def test_own_writes_do_not_come_back_as_storage_events(local_store):
    calls: list[int] = []
    local_store.subscribe(lambda: calls.append(1))

    await local_store.upsert(_marina_loft())
    changed = await local_store.backend.change_feed.check()

    assert changed is False
    assert calls == [1]
    await local_store.close()


@pytest.mark.asyncio
async def test_quota_exceeded_surfaces_as_persistence_error(storage_path):
    store = PropertyStore(
        LocalPropertyBackend(LocalStorage(storage_path, quota_bytes=200), poll_interval_seconds=SLOW_POLL)
    )
    calls: list[int] = []
    store.subscribe(lambda: calls.append(1))

    with pytest.raises(PropertyPersistenceError):
        await store.upsert(_marina_loft(description="x" * 500))

    assert store.find_by_id("marina-loft") is None
    assert calls == [1]
    await store.close()
