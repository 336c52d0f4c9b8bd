"""
Domain Entities Package

This package contains the core domain entities and business logic.
"""

from .device import DEVICE_TYPE_TRAITS, Device, DeviceType, HardwareType
from .errors import (
    AttributeCollision,
    DeviceNotFound,
    DeviceTypeMismatch,
    DomainError,
    InvalidParams,
    PersistenceError,
    SchemaMismatch,
    TraitNotPresent,
    UnsupportedCommand,
)
from .traits import (
    OnOffTrait,
    OpenCloseTrait,
    RebootTrait,
    Trait,
    TraitType,
    VolumeTrait,
    build_trait,
)

__all__ = [
    "Device",
    "DeviceType",
    "HardwareType",
    "DEVICE_TYPE_TRAITS",
    "Trait",
    "TraitType",
    "OnOffTrait",
    "OpenCloseTrait",
    "RebootTrait",
    "VolumeTrait",
    "build_trait",
    "DomainError",
    "SchemaMismatch",
    "DeviceTypeMismatch",
    "AttributeCollision",
    "UnsupportedCommand",
    "InvalidParams",
    "TraitNotPresent",
    "DeviceNotFound",
    "PersistenceError",
]
