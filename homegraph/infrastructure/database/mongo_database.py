"""
MongoDB Database - Infrastructure Layer

This module provides a MongoDB database client for interacting with MongoDB.
It handles connection, collections, and the small set of document
operations the device stores need.
"""

from typing import Any, Dict, List, Optional

import pymongo.errors
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from homegraph.shared import get_logger

logger = get_logger(__name__)


class MongoDatabase:
    """MongoDB database client."""

    def __init__(self, mongo_uri: str, db_name: str):
        """
        Initialize the MongoDB database client.

        Args:
            mongo_uri: MongoDB connection URI
            db_name: Name of the database to use
        """
        self.client: MongoClient = MongoClient(mongo_uri)
        self.db: Database = self.client[db_name]

    def get_collection(self, collection_name: str) -> Collection:
        """
        Get a collection from the database.

        Args:
            collection_name: Name of the collection

        Returns:
            MongoDB collection
        """
        return self.db[collection_name]

    async def find_one(
        self, collection_name: str, query: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """
        Find a single document in a collection.

        Args:
            collection_name: Name of the collection
            query: Query to match documents

        Returns:
            The document if found, None otherwise
        """
        return self.db[collection_name].find_one(query)

    async def find_many(
        self,
        collection_name: str,
        query: Dict[str, Any],
        sort_by: Optional[str] = None,
        sort_direction: int = 1,
    ) -> List[Dict[str, Any]]:
        """
        Find every document in a collection matching a query.

        Args:
            collection_name: Name of the collection
            query: Query to match documents
            sort_by: Field to sort by
            sort_direction: Sort direction (1 for ascending, -1 for descending)

        Returns:
            List of documents
        """
        cursor = self.db[collection_name].find(query)

        if sort_by:
            cursor = cursor.sort(sort_by, sort_direction)

        return list(cursor)

    async def upsert_one(
        self, collection_name: str, query: Dict[str, Any], document: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Replace the document matching a query, inserting it if absent.

        Args:
            collection_name: Name of the collection
            query: Query to match the document to replace
            document: New document

        Returns:
            The new document

        Raises:
            Exception: If the write is not acknowledged
        """
        result = self.db[collection_name].replace_one(query, document, upsert=True)
        if not result.acknowledged:
            raise Exception(f"Failed to upsert document in {collection_name}")
        return document

    async def delete_one(self, collection_name: str, query: Dict[str, Any]) -> bool:
        """
        Delete a document from a collection.

        Args:
            collection_name: Name of the collection
            query: Query to match document to delete

        Returns:
            True if a document was deleted, False if none matched

        Raises:
            Exception: If the delete is not acknowledged
        """
        result = self.db[collection_name].delete_one(query)
        if not result.acknowledged:
            raise Exception(f"Failed to delete document in {collection_name}")
        return result.deleted_count > 0

    def close(self) -> None:
        """Close the database connection."""
        self.client.close()

    async def create_indexes(self, collection_name: str = "devices") -> None:
        """
        Create the indexes the device store relies on.
        This is an async method to be called during application startup.
        """
        try:
            self.db[collection_name].create_index(
                "path", name="path_unique_idx", unique=True
            )
        except pymongo.errors.OperationFailure as e:
            logger.warning(
                "mongo.create_index_failed",
                collection=collection_name,
                error=str(e),
            )
