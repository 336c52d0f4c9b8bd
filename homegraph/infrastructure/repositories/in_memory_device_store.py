"""
In-Memory Device Store - Infrastructure Layer

Process-local implementation of the IDeviceStore interface, used by the
``memory`` storage backend and by tests.
"""

from typing import Dict, List, Optional

from homegraph.domain.repositories.device_store import IDeviceStore


class InMemoryDeviceStore(IDeviceStore):
    """Dictionary-backed device store."""

    def __init__(self, records: Optional[Dict[str, bytes]] = None):
        self.records: Dict[str, bytes] = dict(records or {})

    async def get(self, path: str) -> Optional[bytes]:
        return self.records.get(path)

    async def put(self, path: str, data: bytes) -> None:
        self.records[path] = bytes(data)

    async def delete(self, path: str) -> None:
        self.records.pop(path, None)

    async def list_paths(self, prefix: str) -> List[str]:
        prefix = prefix.strip("/") + "/"
        return sorted(
            path
            for path in self.records
            if path.startswith(prefix) and "/" not in path[len(prefix) :]
        )
