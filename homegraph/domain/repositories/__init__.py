"""
Repositories Package

This package contains interfaces defining repository contracts
for data access operations. Specific implementations are provided
by the infrastructure layer.
"""

from .device_store import IDeviceStore

__all__ = ["IDeviceStore"]
