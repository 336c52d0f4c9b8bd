"""
MongoDB Device Store - Infrastructure Layer

This module implements the IDeviceStore interface on top of MongoDB.
Each path is stored as one document holding the raw record bytes.
"""

from typing import List, Optional

from homegraph.domain.entities.errors import SchemaMismatch
from homegraph.domain.repositories.device_store import IDeviceStore
from homegraph.infrastructure.database import MongoDatabase
from homegraph.shared import get_logger

logger = get_logger(__name__)


def _parent(path: str) -> str:
    return path.rsplit("/", 1)[0] if "/" in path else ""


class MongoDeviceStore(IDeviceStore):
    """MongoDB implementation of the device store."""

    COLLECTION_NAME = "device_records"

    def __init__(
        self, mongo_database: MongoDatabase, collection_name: str = COLLECTION_NAME
    ):
        """
        Initialize the MongoDB device store.

        Args:
            mongo_database: MongoDB database client
            collection_name: Collection holding the record documents
        """
        self.db = mongo_database
        self.collection_name = collection_name

    async def get(self, path: str) -> Optional[bytes]:
        document = await self.db.find_one(self.collection_name, {"path": path})
        if document is None:
            return None
        data = document.get("data")
        if not isinstance(data, (bytes, bytearray)):
            raise SchemaMismatch(
                f"Record document at {path} holds no binary data",
                details={"path": path},
            )
        return bytes(data)

    async def put(self, path: str, data: bytes) -> None:
        await self.db.upsert_one(
            self.collection_name,
            {"path": path},
            {"path": path, "prefix": _parent(path), "data": data},
        )
        logger.debug("device_store.put", path=path, size=len(data))

    async def delete(self, path: str) -> None:
        deleted = await self.db.delete_one(self.collection_name, {"path": path})
        logger.debug("device_store.delete", path=path, deleted=deleted)

    async def list_paths(self, prefix: str) -> List[str]:
        documents = await self.db.find_many(
            self.collection_name, {"prefix": prefix.strip("/")}, sort_by="path"
        )
        return [document["path"] for document in documents]
