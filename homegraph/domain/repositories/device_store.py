"""
Device Store Interface

This module defines the persistence port used by the device registry.
The store is an opaque key-value backend addressed by path; it knows
nothing about the shape of the records it holds.
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class IDeviceStore(ABC):
    """Interface for key-value device record stores."""

    @abstractmethod
    async def get(self, path: str) -> Optional[bytes]:
        """
        Read the record stored at a path.

        Args:
            path: Record path, e.g. ``devices/tv-1``

        Returns:
            The stored bytes, or None when nothing is stored at the path
        """
        pass

    @abstractmethod
    async def put(self, path: str, data: bytes) -> None:
        """
        Create or replace the record stored at a path.

        Args:
            path: Record path
            data: Serialized record
        """
        pass

    @abstractmethod
    async def delete(self, path: str) -> None:
        """
        Delete the record stored at a path. Deleting a missing path is a no-op.

        Args:
            path: Record path
        """
        pass

    @abstractmethod
    async def list_paths(self, prefix: str) -> List[str]:
        """
        List the paths stored under a collection prefix.

        Args:
            prefix: Collection path, e.g. ``devices``

        Returns:
            Paths of every record directly under the prefix
        """
        pass
