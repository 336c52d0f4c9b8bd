"""
Domain Entities - Device

This module defines the device entity: a named, typed unit owning one or
more traits. The device type fixes which traits are legal, and the combined
attribute/state document is always derived from the current trait states.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from homegraph.domain.entities.errors import (
    DeviceTypeMismatch,
    SchemaMismatch,
    TraitNotPresent,
)
from homegraph.domain.entities.traits import (
    Trait,
    TraitType,
    build_trait,
    parse_trait_type,
)
from homegraph.domain.services.attribute_aggregator import AttributeDocument, merge


class DeviceType(str, Enum):
    """Kinds of devices that can be registered."""

    SWITCH = "Switch"
    LIGHT = "Light"
    GARAGE_DOOR = "GarageDoor"
    ROUTER = "Router"
    TV = "TV"


class HardwareType(str, Enum):
    """Hardware platform a device runs on."""

    ARDUINO = "ARDUINO"
    PI = "PI"
    LG = "LG"
    OTHER = "OTHER"


DEVICE_TYPE_TRAITS: Dict[DeviceType, Tuple[TraitType, ...]] = {
    DeviceType.SWITCH: (TraitType.ON_OFF,),
    DeviceType.LIGHT: (TraitType.ON_OFF,),
    DeviceType.GARAGE_DOOR: (TraitType.OPEN_CLOSE,),
    DeviceType.ROUTER: (TraitType.REBOOT,),
    DeviceType.TV: (TraitType.ON_OFF, TraitType.VOLUME),
}

_RECORD_KEYS = frozenset(
    {
        "id",
        "name",
        "device_type",
        "traits",
        "nicknames",
        "hardware",
        "sw_version",
        "user_id",
    }
)


def _parse_enum(enum_cls: Any, value: Any, label: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        raise SchemaMismatch(
            f"Unknown {label} '{value}'", details={label: str(value)}
        ) from None


def validate_trait_set(device_type: DeviceType, traits: Sequence[Trait]) -> None:
    """Check ``traits`` against the fixed device-type table.

    Raises:
        DeviceTypeMismatch: If a trait is missing, extra or duplicated.
    """

    expected = DEVICE_TYPE_TRAITS[device_type]
    actual = [trait.trait_type for trait in traits]
    if len(actual) != len(set(actual)) or set(actual) != set(expected):
        raise DeviceTypeMismatch(
            device_type.value,
            [trait.value for trait in expected],
            [trait.value for trait in actual],
        )


@dataclass
class Device:
    """Represents an automatable device exposed to the assistant."""

    id: str
    name: str
    device_type: DeviceType
    traits: List[Trait]
    nicknames: List[str] = field(default_factory=list)
    hardware: HardwareType = HardwareType.OTHER
    sw_version: str = "1.0"
    user_id: str = ""
    document: AttributeDocument = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.device_type = _parse_enum(DeviceType, self.device_type, "device_type")
        self.hardware = _parse_enum(HardwareType, self.hardware, "hardware")
        self.traits = list(self.traits)
        self.nicknames = list(self.nicknames)
        validate_trait_set(self.device_type, self.traits)
        self.document = merge(self.traits)

    @classmethod
    def provision(
        cls,
        device_id: str,
        name: str,
        device_type: Union[DeviceType, str],
        trait_states: Optional[Mapping[str, Mapping[str, Any]]] = None,
        **descriptive: Any,
    ) -> "Device":
        """Create a device carrying the default trait set for its type."""
        device_type = _parse_enum(DeviceType, device_type, "device_type")
        trait_states = dict(trait_states or {})
        expected = DEVICE_TYPE_TRAITS[device_type]
        unexpected = [
            key for key in trait_states if parse_trait_type(key) not in expected
        ]
        if unexpected:
            raise DeviceTypeMismatch(
                device_type.value,
                [trait.value for trait in expected],
                [trait.value for trait in expected] + unexpected,
            )
        traits = [
            build_trait(trait_type, trait_states.get(trait_type.value))
            for trait_type in expected
        ]
        return cls(
            id=device_id,
            name=name,
            device_type=device_type,
            traits=traits,
            **descriptive,
        )

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @property
    def trait_types(self) -> List[TraitType]:
        return [trait.trait_type for trait in self.traits]

    def get_trait(self, trait: Union[TraitType, str]) -> Trait:
        """Return the trait of the given variant or raise ``TraitNotPresent``."""
        return self.traits[self._trait_index(trait)]

    def attributes(self) -> Dict[str, Any]:
        return dict(self.document.attributes)

    def state(self) -> Dict[str, Any]:
        return dict(self.document.state)

    def apply_command(
        self,
        trait: Union[TraitType, str],
        command: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """
        Apply a trait command; the only way a device's state changes.

        The new trait list and document are computed before anything is
        assigned, so a failing command leaves the device untouched.

        Raises:
            TraitNotPresent: If the device does not carry the trait
            UnsupportedCommand: If the trait does not know the command
            InvalidParams: If the parameters are malformed
        """
        index = self._trait_index(trait)
        current = self.traits[index]
        updated = current.with_state(current.apply_command(command, params))

        traits = list(self.traits)
        traits[index] = updated
        document = merge(traits)

        self.traits = traits
        self.document = document

    def copy(self) -> "Device":
        return copy.deepcopy(self)

    def to_record(self) -> Dict[str, Any]:
        """Serialize the device to its persisted record."""
        return {
            "id": self.id,
            "name": self.name,
            "device_type": self.device_type.value,
            "traits": {trait.name: trait.state() for trait in self.traits},
            "nicknames": list(self.nicknames),
            "hardware": self.hardware.value,
            "sw_version": self.sw_version,
            "user_id": self.user_id,
        }

    @classmethod
    def from_record(cls, record: Any) -> "Device":
        """
        Rebuild a device from its persisted record.

        Raises:
            SchemaMismatch: If the record or a trait state is malformed
            DeviceTypeMismatch: If the traits do not fit the device type
            AttributeCollision: If two traits contribute the same key
        """
        if not isinstance(record, Mapping):
            raise SchemaMismatch("Device record must be a mapping")

        unknown = sorted(set(record) - _RECORD_KEYS)
        if unknown:
            raise SchemaMismatch(
                f"Device record has unknown fields: {unknown}",
                details={"fields": unknown},
            )
        for key in ("id", "device_type", "traits"):
            if key not in record:
                raise SchemaMismatch(
                    f"Device record is missing '{key}'", details={"field": key}
                )

        device_id = record["id"]
        if not isinstance(device_id, str) or not device_id:
            raise SchemaMismatch("Device record 'id' must be a non-empty string")

        raw_traits = record["traits"]
        if not isinstance(raw_traits, Mapping):
            raise SchemaMismatch(
                "Device record 'traits' must map trait names to states",
                details={"id": device_id},
            )

        for key, state in raw_traits.items():
            if not isinstance(state, Mapping):
                raise SchemaMismatch(
                    f"State for trait {key} must be a mapping",
                    details={"id": device_id, "trait": str(key)},
                )

        name = record.get("name") or ""
        nicknames = record.get("nicknames") or []
        if not isinstance(name, str) or not isinstance(nicknames, list):
            raise SchemaMismatch(
                "Device record has malformed name fields", details={"id": device_id}
            )

        return cls(
            id=device_id,
            name=name,
            device_type=record["device_type"],
            traits=[build_trait(key, state) for key, state in raw_traits.items()],
            nicknames=[str(nickname) for nickname in nicknames],
            hardware=record.get("hardware", HardwareType.OTHER.value),
            sw_version=str(record.get("sw_version", "1.0")),
            user_id=str(record.get("user_id") or ""),
        )

    def _trait_index(self, trait: Union[TraitType, str]) -> int:
        try:
            trait_type = TraitType(trait)
        except ValueError:
            raise TraitNotPresent(self.id, str(trait)) from None
        for index, candidate in enumerate(self.traits):
            if candidate.trait_type is trait_type:
                return index
        raise TraitNotPresent(self.id, trait_type.value)
