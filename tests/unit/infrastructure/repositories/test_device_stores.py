from __future__ import annotations

import pytest

from homegraph.domain.entities.device import Device
from homegraph.domain.entities.errors import SchemaMismatch
from homegraph.domain.services.device_registry import DeviceRegistry, encode_record
from homegraph.infrastructure.repositories import InMemoryDeviceStore, MongoDeviceStore
from tests.conftest import FakeMongoDatabase


@pytest.mark.asyncio
async def test_in_memory_store_crud(memory_store: InMemoryDeviceStore) -> None:
    await memory_store.put("devices/b", b"2")
    await memory_store.put("devices/a", b"1")
    await memory_store.put("devices/a/nested", b"3")
    await memory_store.put("devicesx/c", b"4")

    assert await memory_store.get("devices/a") == b"1"
    assert await memory_store.get("devices/zzz") is None
    assert await memory_store.list_paths("devices") == ["devices/a", "devices/b"]
    assert await memory_store.list_paths("/devices/") == ["devices/a", "devices/b"]

    await memory_store.delete("devices/a")
    await memory_store.delete("devices/a")
    assert await memory_store.list_paths("devices") == ["devices/b"]


@pytest.mark.asyncio
async def test_mongo_store_round_trip(fake_mongo_database: FakeMongoDatabase) -> None:
    store = MongoDeviceStore(fake_mongo_database)  # type: ignore[arg-type]

    await store.put("devices/tv-1", b'{"id":"tv-1"}')
    await store.put("devices/garage-1", b'{"id":"garage-1"}')
    await store.put("rooms/kitchen", b"{}")

    collection = fake_mongo_database.get_collection(MongoDeviceStore.COLLECTION_NAME)
    assert collection.documents["devices/tv-1"] == {
        "path": "devices/tv-1",
        "prefix": "devices",
        "data": b'{"id":"tv-1"}',
    }
    assert await store.get("devices/tv-1") == b'{"id":"tv-1"}'
    assert await store.get("devices/missing") is None
    assert await store.list_paths("devices/") == [
        "devices/garage-1",
        "devices/tv-1",
    ]


@pytest.mark.asyncio
async def test_mongo_store_put_replaces_and_delete_is_idempotent(
    fake_mongo_database: FakeMongoDatabase,
) -> None:
    store = MongoDeviceStore(
        fake_mongo_database, collection_name="records"  # type: ignore[arg-type]
    )

    await store.put("devices/tv-1", b"old")
    await store.put("devices/tv-1", b"new")
    assert await store.get("devices/tv-1") == b"new"

    await store.delete("devices/tv-1")
    await store.delete("devices/tv-1")
    assert await store.list_paths("devices") == []
    assert "records" in fake_mongo_database.collections


@pytest.mark.asyncio
async def test_mongo_store_rejects_documents_without_data(
    fake_mongo_database: FakeMongoDatabase, tv_device: Device
) -> None:
    store = MongoDeviceStore(fake_mongo_database)  # type: ignore[arg-type]
    await store.put("devices/tv-1", encode_record(tv_device))
    collection = fake_mongo_database.get_collection(MongoDeviceStore.COLLECTION_NAME)
    collection.documents["devices/corrupt"] = {
        "path": "devices/corrupt",
        "prefix": "devices",
    }

    with pytest.raises(SchemaMismatch):
        await store.get("devices/corrupt")

    registry = DeviceRegistry(store)  # type: ignore[arg-type]
    report = await registry.load()

    assert report.loaded == ["tv-1"]
    assert list(report.skipped) == ["devices/corrupt"]
    assert registry.get("tv-1") == tv_device
