"""
Device Registry - Domain Service

This module keeps the live set of devices in memory and is the single
place where device mutations are applied. Every mutation is written
through to the device store before the in-memory state changes, so a
caller never observes a registry that is ahead of the backend.
"""

import asyncio
import json
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Union

from homegraph.domain.entities.device import Device
from homegraph.domain.entities.errors import (
    DeviceNotFound,
    DomainError,
    PersistenceError,
    SchemaMismatch,
)
from homegraph.domain.entities.traits import TraitType
from homegraph.domain.repositories.device_store import IDeviceStore
from homegraph.shared import get_logger

logger = get_logger(__name__)


@dataclass
class LoadReport:
    """Outcome of populating the registry from the store."""

    loaded: List[str] = field(default_factory=list)
    skipped: Dict[str, str] = field(default_factory=dict)


def encode_record(device: Device) -> bytes:
    return json.dumps(device.to_record(), separators=(",", ":")).encode("utf-8")


def decode_record(data: bytes) -> Device:
    try:
        record = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SchemaMismatch(f"Device record is not valid JSON: {e}") from e
    return Device.from_record(record)


class DeviceRegistry:
    """In-memory collection of devices backed by a key-value store."""

    def __init__(self, device_store: IDeviceStore, collection: str = "devices"):
        """
        Initialize the registry.

        Args:
            device_store: Backend holding one serialized record per device
            collection: Path prefix under which device records live
        """
        self._store = device_store
        self._collection = collection.strip("/")
        self._devices: Dict[str, Device] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}

    def path_for(self, device_id: str) -> str:
        return f"{self._collection}/{device_id}"

    async def load(self) -> LoadReport:
        """
        Populate the registry with every record in the collection.

        Records that cannot be read or decoded are logged and skipped so one corrupt
        device does not keep the rest of the fleet from loading.

        Returns:
            LoadReport listing loaded ids and skipped paths with reasons

        Raises:
            PersistenceError: If the store cannot be listed
        """
        report = LoadReport()
        devices: Dict[str, Device] = {}

        try:
            paths = await self._store.list_paths(self._collection)
        except Exception as e:
            raise PersistenceError(
                f"Failed to list device records: {e}",
                details={"collection": self._collection},
            ) from e

        for path in paths:
            try:
                data = await self._read(path)
                if data is None:
                    continue
                device = decode_record(data)
                if self.path_for(device.id) != path:
                    raise SchemaMismatch(
                        f"Record at {path} belongs to device {device.id}"
                    )
            except DomainError as e:
                logger.warning(
                    "registry.record_skipped",
                    path=path,
                    error_type=type(e).__name__,
                    error=e.message,
                )
                report.skipped[path] = e.message
                continue

            devices[device.id] = device
            report.loaded.append(device.id)

        self._devices = devices
        self._locks = {
            device_id: lock
            for device_id, lock in self._locks.items()
            if device_id in devices or device_id in self._lock_users
        }
        logger.info(
            "registry.loaded",
            collection=self._collection,
            loaded=len(report.loaded),
            skipped=len(report.skipped),
        )
        return report

    def __contains__(self, device_id: object) -> bool:
        return device_id in self._devices

    def __len__(self) -> int:
        return len(self._devices)

    def get(self, device_id: str) -> Device:
        """
        Return a snapshot of a device.

        Raises:
            DeviceNotFound: If no device has this id
        """
        device = self._devices.get(device_id)
        if device is None:
            raise DeviceNotFound(device_id)
        return device.copy()

    def find(self, device_id: str) -> Optional[Device]:
        device = self._devices.get(device_id)
        return device.copy() if device is not None else None

    def list_devices(self, user_id: Optional[str] = None) -> List[Device]:
        """Return snapshots of all devices, optionally for one account."""
        return [
            device.copy()
            for device in self._devices.values()
            if user_id is None or device.user_id == user_id
        ]

    async def upsert(self, device: Device) -> Device:
        """
        Insert or replace a device, writing it through to the store.

        Returns:
            A snapshot of the stored device
        """
        stored = device.copy()
        async with self._device_lock(stored.id):
            await self._write(stored)
            self._devices[stored.id] = stored
        logger.info("registry.device_upserted", device_id=stored.id)
        return stored.copy()

    async def remove(self, device_id: str) -> None:
        """
        Remove a device and delete its record.

        Raises:
            DeviceNotFound: If no device has this id
        """
        if device_id not in self._devices:
            raise DeviceNotFound(device_id)
        async with self._device_lock(device_id):
            if device_id not in self._devices:
                raise DeviceNotFound(device_id)
            path = self.path_for(device_id)
            try:
                await self._store.delete(path)
            except Exception as e:
                raise PersistenceError(
                    f"Failed to delete device record {path}: {e}",
                    details={"device_id": device_id},
                ) from e
            del self._devices[device_id]
        logger.info("registry.device_removed", device_id=device_id)

    async def apply_command(
        self,
        device_id: str,
        trait: Union[TraitType, str],
        command: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Device:
        """
        Apply a trait command to one device and persist the result.

        Commands on the same device are serialized; the command runs on a
        private copy that only replaces the live device once the write has
        succeeded.

        Returns:
            A snapshot of the updated device

        Raises:
            DeviceNotFound: If no device has this id
            PersistenceError: If the updated record cannot be written
            DomainError: Any trait or device command error, unchanged
        """
        if device_id not in self._devices:
            raise DeviceNotFound(device_id)
        async with self._device_lock(device_id):
            current = self._devices.get(device_id)
            if current is None:
                raise DeviceNotFound(device_id)

            updated = current.copy()
            updated.apply_command(trait, command, params)
            await self._write(updated)
            self._devices[device_id] = updated

        logger.debug(
            "registry.command_applied",
            device_id=device_id,
            trait=str(getattr(trait, "value", trait)),
            command=command,
        )
        return updated.copy()

    async def _write(self, device: Device) -> None:
        path = self.path_for(device.id)
        try:
            await self._store.put(path, encode_record(device))
        except Exception as e:
            raise PersistenceError(
                f"Failed to write device record {path}: {e}",
                details={"device_id": device.id},
            ) from e

    async def _read(self, path: str) -> Optional[bytes]:
        try:
            return await self._store.get(path)
        except DomainError:
            raise
        except Exception as e:
            raise PersistenceError(
                f"Failed to read device record {path}: {e}", details={"path": path}
            ) from e

    @asynccontextmanager
    async def _device_lock(self, device_id: str) -> AsyncIterator[None]:
        """
        Serialize mutations of one device.

        A lock is kept while its device exists or while any coroutine holds
        or awaits it.
        """
        lock = self._locks.setdefault(device_id, asyncio.Lock())
        self._lock_users[device_id] = self._lock_users.get(device_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[device_id] -= 1
            if not self._lock_users[device_id]:
                del self._lock_users[device_id]
                if device_id not in self._devices:
                    self._locks.pop(device_id, None)
