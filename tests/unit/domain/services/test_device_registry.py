from __future__ import annotations

import asyncio
import json
from typing import List, Optional

import pytest

from homegraph.domain.entities.device import Device
from homegraph.domain.entities.errors import (
    DeviceNotFound,
    InvalidParams,
    PersistenceError,
    SchemaMismatch,
)
from homegraph.domain.repositories.device_store import IDeviceStore
from homegraph.domain.services.device_registry import (
    DeviceRegistry,
    decode_record,
    encode_record,
)
from homegraph.infrastructure.repositories import InMemoryDeviceStore
from tests.conftest import build_registry


class _FailingStore(IDeviceStore):
    def __init__(self, fail_on: str) -> None:
        self.fail_on = fail_on
        self.records: dict[str, bytes] = {}

    async def get(self, path: str) -> Optional[bytes]:
        if self.fail_on == path:
            raise ConnectionError("read timeout")
        return self.records.get(path)

    async def put(self, path: str, data: bytes) -> None:
        if self.fail_on == "put":
            raise ConnectionError("backend unavailable")
        self.records[path] = data

    async def delete(self, path: str) -> None:
        if self.fail_on == "delete":
            raise ConnectionError("backend unavailable")
        self.records.pop(path, None)

    async def list_paths(self, prefix: str) -> List[str]:
        if self.fail_on == "list":
            raise ConnectionError("backend unavailable")
        return sorted(self.records)


def test_encode_decode_record(tv_device: Device) -> None:
    data = encode_record(tv_device)

    assert json.loads(data)["id"] == "tv-1"
    assert decode_record(data) == tv_device

    with pytest.raises(SchemaMismatch):
        decode_record(b"{not json")


@pytest.mark.asyncio
async def test_load_skips_bad_records(
    memory_store: InMemoryDeviceStore, tv_device: Device, garage_door: Device
) -> None:
    await memory_store.put("devices/tv-1", encode_record(tv_device))
    await memory_store.put("devices/garage-1", encode_record(garage_door))
    await memory_store.put("devices/broken", b"\xff\xfe")
    await memory_store.put(
        "devices/router-x",
        json.dumps(
            {"id": "router-x", "device_type": "Router", "traits": {"OnOff": {}}}
        ).encode(),
    )
    await memory_store.put("devices/alias", encode_record(tv_device))
    await memory_store.put("other/tv-9", encode_record(tv_device))

    registry = DeviceRegistry(memory_store)
    report = await registry.load()

    assert sorted(report.loaded) == ["garage-1", "tv-1"]
    assert set(report.skipped) == {
        "devices/alias",
        "devices/broken",
        "devices/router-x",
    }
    assert "Router" in report.skipped["devices/router-x"]
    assert len(registry) == 2
    assert "tv-1" in registry


@pytest.mark.asyncio
async def test_load_fails_when_store_cannot_be_listed() -> None:
    registry = DeviceRegistry(_FailingStore("list"))

    with pytest.raises(PersistenceError):
        await registry.load()


@pytest.mark.asyncio
async def test_load_skips_records_the_store_cannot_read(
    tv_device: Device, garage_door: Device
) -> None:
    store = _FailingStore("devices/garage-1")
    await store.put("devices/tv-1", encode_record(tv_device))
    await store.put("devices/garage-1", encode_record(garage_door))

    registry = DeviceRegistry(store)
    report = await registry.load()

    assert report.loaded == ["tv-1"]
    assert "read timeout" in report.skipped["devices/garage-1"]
    assert len(registry) == 1


@pytest.mark.asyncio
async def test_get_returns_snapshots(tv_device: Device) -> None:
    registry = await build_registry(tv_device)

    snapshot = registry.get("tv-1")
    snapshot.apply_command("OnOff", "on")

    assert registry.get("tv-1").state()["on"] is False
    assert registry.find("missing") is None
    with pytest.raises(DeviceNotFound):
        registry.get("missing")


@pytest.mark.asyncio
async def test_list_devices_filters_by_user(
    tv_device: Device, light_device: Device
) -> None:
    registry = await build_registry(tv_device, light_device)

    assert {device.id for device in registry.list_devices()} == {"tv-1", "light-1"}
    assert [device.id for device in registry.list_devices(user_id="user-2")] == [
        "light-1"
    ]


@pytest.mark.asyncio
async def test_apply_command_writes_through(
    memory_store: InMemoryDeviceStore, tv_device: Device
) -> None:
    registry = await build_registry(tv_device, store=memory_store)

    updated = await registry.apply_command("tv-1", "Volume", "setVolume", {"level": 20})

    assert updated.state() == {"on": False, "currentVolume": 20, "isMuted": False}
    stored = decode_record(memory_store.records["devices/tv-1"])
    assert stored.state() == updated.state()
    assert registry.get("tv-1").state() == updated.state()


@pytest.mark.asyncio
async def test_apply_command_errors_leave_registry_untouched(
    memory_store: InMemoryDeviceStore, tv_device: Device
) -> None:
    registry = await build_registry(tv_device, store=memory_store)
    record_before = memory_store.records["devices/tv-1"]

    with pytest.raises(InvalidParams):
        await registry.apply_command("tv-1", "Volume", "setVolume", {"level": 500})
    with pytest.raises(DeviceNotFound):
        await registry.apply_command("nope", "OnOff", "on")

    assert memory_store.records["devices/tv-1"] == record_before
    assert registry.get("tv-1") == tv_device


@pytest.mark.asyncio
async def test_failed_write_does_not_commit(tv_device: Device) -> None:
    store = _FailingStore("none")
    registry = await build_registry(tv_device, store=store)  # type: ignore[arg-type]
    store.fail_on = "put"

    with pytest.raises(PersistenceError):
        await registry.apply_command("tv-1", "OnOff", "on")

    assert registry.get("tv-1").state()["on"] is False


@pytest.mark.asyncio
async def test_upsert_and_remove(
    memory_store: InMemoryDeviceStore, garage_door: Device
) -> None:
    registry = DeviceRegistry(memory_store)

    stored = await registry.upsert(garage_door)
    assert stored == garage_door
    assert "devices/garage-1" in memory_store.records

    await registry.remove("garage-1")
    assert "garage-1" not in registry
    assert memory_store.records == {}

    with pytest.raises(DeviceNotFound):
        await registry.remove("garage-1")


@pytest.mark.asyncio
async def test_remove_wraps_store_failures(tv_device: Device) -> None:
    store = _FailingStore("none")
    registry = await build_registry(tv_device, store=store)  # type: ignore[arg-type]
    store.fail_on = "delete"

    with pytest.raises(PersistenceError):
        await registry.remove("tv-1")
    assert "tv-1" in registry


@pytest.mark.asyncio
async def test_concurrent_commands_on_one_device_are_serialized(
    tv_device: Device,
) -> None:
    registry = await build_registry(tv_device)

    await asyncio.gather(
        *(
            registry.apply_command(
                "tv-1", "Volume", "volumeRelative", {"relativeSteps": 1}
            )
            for _ in range(20)
        )
    )

    assert registry.get("tv-1").state()["currentVolume"] == 30


class _GatedStore(InMemoryDeviceStore):
    def __init__(self) -> None:
        super().__init__()
        self.gate = asyncio.Event()

    async def delete(self, path: str) -> None:
        await self.gate.wait()
        await super().delete(path)


@pytest.mark.asyncio
async def test_unknown_ids_do_not_accumulate_locks(tv_device: Device) -> None:
    registry = await build_registry(tv_device)

    for index in range(100):
        with pytest.raises(DeviceNotFound):
            await registry.remove(f"missing-{index}")
        with pytest.raises(DeviceNotFound):
            await registry.apply_command(f"missing-{index}", "OnOff", "on")

    assert registry._locks == {}

    await registry.apply_command("tv-1", "OnOff", "on")
    await registry.remove("tv-1")
    assert registry._locks == {}


@pytest.mark.asyncio
async def test_remove_keeps_lock_while_another_mutation_waits(
    tv_device: Device,
) -> None:
    store = _GatedStore()
    registry = await build_registry(tv_device, store=store)

    removal = asyncio.create_task(registry.remove("tv-1"))
    await asyncio.sleep(0)
    reinsert = asyncio.create_task(registry.upsert(tv_device))
    await asyncio.sleep(0)
    lock = registry._locks["tv-1"]
    assert lock.locked()

    store.gate.set()
    await removal
    assert registry._locks.get("tv-1") is lock

    await reinsert
    assert "tv-1" in registry
    assert "devices/tv-1" in store.records
    assert registry._locks["tv-1"] is lock
