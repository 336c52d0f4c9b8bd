"""
Database package - Infrastructure Layer

This package contains the MongoDB client wrapper used by the device
store.
"""

from homegraph.infrastructure.database.mongo_database import MongoDatabase

__all__ = ["MongoDatabase"]
