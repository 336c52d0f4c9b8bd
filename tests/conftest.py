from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, Iterator, List, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from homegraph.domain.entities.device import (  # noqa: E402
    Device,
    DeviceType,
    HardwareType,
)
from homegraph.domain.entities.traits import (  # noqa: E402
    OnOffTrait,
    OpenCloseTrait,
    VolumeTrait,
)
from homegraph.domain.services.device_registry import (  # noqa: E402
    DeviceRegistry,
    encode_record,
)
from homegraph.infrastructure.repositories import InMemoryDeviceStore  # noqa: E402


@pytest.fixture()
def tv_device() -> Device:
    return Device(
        id="tv-1",
        name="Living Room TV",
        device_type=DeviceType.TV,
        traits=[
            OnOffTrait({"on": False}),
            VolumeTrait({"currentVolume": 10, "isMuted": False}),
        ],
        nicknames=["TV"],
        hardware=HardwareType.LG,
        sw_version="2.1",
        user_id="user-1",
    )


@pytest.fixture()
def garage_door() -> Device:
    return Device(
        id="garage-1",
        name="Garage",
        device_type=DeviceType.GARAGE_DOOR,
        traits=[OpenCloseTrait({"open": False})],
        hardware=HardwareType.ARDUINO,
        user_id="user-1",
    )


@pytest.fixture()
def light_device() -> Device:
    return Device.provision("light-1", "Desk Lamp", DeviceType.LIGHT, user_id="user-2")


@pytest.fixture()
def router_device() -> Device:
    return Device.provision("router-1", "Router", DeviceType.ROUTER)


async def build_registry(
    *devices: Device, store: InMemoryDeviceStore | None = None
) -> DeviceRegistry:
    """Load a registry from an in-memory store seeded with ``devices``."""
    store = store if store is not None else InMemoryDeviceStore()
    for device in devices:
        await store.put(f"devices/{device.id}", encode_record(device))
    registry = DeviceRegistry(store)
    await registry.load()
    return registry


class FakeCursor:
    def __init__(self, documents: Sequence[Dict[str, Any]]):
        self._documents = list(documents)

    def sort(self, key: str | None = None, direction: int = 1) -> "FakeCursor":
        if key:
            self._documents.sort(
                key=lambda document: document.get(key), reverse=direction < 0
            )
        return self

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self._documents)


class FakeCollection:
    def __init__(self) -> None:
        self.documents: Dict[str, Dict[str, Any]] = {}
        self.last_query: Dict[str, Any] | None = None
        self.created_indexes: List[tuple[Any, ...]] = []
        self.acknowledge = True

    def find_one(self, query: Dict[str, Any]) -> Dict[str, Any] | None:
        self.last_query = query
        key = query.get("path")
        if not isinstance(key, str):
            return None
        return self.documents.get(key)

    def find(self, query: Dict[str, Any]) -> FakeCursor:
        self.last_query = query
        results = [doc for doc in self.documents.values() if self._matches(doc, query)]
        return FakeCursor(results)

    def replace_one(
        self, query: Dict[str, Any], document: Dict[str, Any], upsert: bool = False
    ) -> Any:
        key = query.get("path")
        if not isinstance(key, str):
            return SimpleNamespace(matched_count=0, acknowledged=self.acknowledge)
        matched = key in self.documents
        if matched or upsert:
            self.documents[key] = document
        return SimpleNamespace(
            matched_count=int(matched), acknowledged=self.acknowledge
        )

    def delete_one(self, query: Dict[str, Any]) -> Any:
        key = query.get("path")
        if isinstance(key, str) and key in self.documents:
            del self.documents[key]
            return SimpleNamespace(deleted_count=1, acknowledged=self.acknowledge)
        return SimpleNamespace(deleted_count=0, acknowledged=self.acknowledge)

    def create_index(self, keys: Any, name: str | None = None, **kwargs: Any) -> Any:
        self.created_indexes.append((keys, name, kwargs))
        return name or keys

    @staticmethod
    def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
        for key, value in query.items():
            if document.get(key) != value:
                return False
        return True


class FakeMongoDatabase:
    def __init__(self) -> None:
        self.collections: Dict[str, FakeCollection] = {}
        self.indexed: List[str] = []
        self.closed = False

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())

    async def find_one(self, collection_name: str, query: Dict[str, Any]) -> Any:
        return self.get_collection(collection_name).find_one(query)

    async def find_many(
        self,
        collection_name: str,
        query: Dict[str, Any],
        sort_by: str | None = None,
        sort_direction: int = 1,
    ) -> List[Dict[str, Any]]:
        cursor = self.get_collection(collection_name).find(query)
        cursor.sort(sort_by, sort_direction)
        return list(cursor)

    async def upsert_one(
        self, collection_name: str, query: Dict[str, Any], document: Dict[str, Any]
    ) -> Any:
        result = self.get_collection(collection_name).replace_one(
            query, document, upsert=True
        )
        if not getattr(result, "acknowledged", True):
            raise Exception(f"Failed to upsert document in {collection_name}")
        return document

    async def delete_one(self, collection_name: str, query: Dict[str, Any]) -> bool:
        result = self.get_collection(collection_name).delete_one(query)
        if not getattr(result, "acknowledged", True):
            raise Exception(f"Failed to delete document in {collection_name}")
        return result.deleted_count > 0

    async def create_indexes(self, collection_name: str = "devices") -> None:
        self.indexed.append(collection_name)

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def fake_mongo_database() -> FakeMongoDatabase:
    return FakeMongoDatabase()


@pytest.fixture()
def memory_store() -> InMemoryDeviceStore:
    return InMemoryDeviceStore()
