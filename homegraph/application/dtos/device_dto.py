"""
Device DTOs - Application Layer

This module defines Data Transfer Objects (DTOs) for provisioning and
inspecting registered devices. These DTOs are used to transfer data between
the application layer and the presentation layer (API).
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field

from homegraph.domain.entities.device import Device, DeviceType, HardwareType


class DeviceCreateDTO(BaseModel):
    """DTO for provisioning a new device."""

    id: str = Field(min_length=1, description="Stable device identifier")
    name: str = Field(default="", description="Display name")
    device_type: DeviceType = Field(description="Kind of device")
    traits: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict,
        description="Initial state per trait; omitted traits use defaults",
    )
    nicknames: List[str] = Field(default_factory=list)
    hardware: HardwareType = Field(default=HardwareType.OTHER)
    sw_version: str = Field(default="1.0")
    user_id: str = Field(default="", description="Owning account")

    model_config = {
        "json_schema_extra": {
            "example": {
                "id": "tv-1",
                "name": "Living Room TV",
                "device_type": "TV",
                "traits": {"Volume": {"currentVolume": 10, "isMuted": False}},
                "nicknames": ["TV"],
                "hardware": "LG",
                "sw_version": "1.0",
                "user_id": "user-1",
            }
        }
    }


class DeviceResponseDTO(BaseModel):
    """DTO describing a registered device and its aggregated document."""

    id: str
    name: str
    device_type: DeviceType
    traits: List[str] = Field(description="Trait names in device order")
    attributes: Dict[str, Any] = Field(description="Merged static attributes")
    state: Dict[str, Any] = Field(description="Merged current state")
    nicknames: List[str] = Field(default_factory=list)
    hardware: HardwareType
    sw_version: str
    user_id: str

    @classmethod
    def from_entity(cls, device: Device) -> "DeviceResponseDTO":
        return cls(
            id=device.id,
            name=device.display_name,
            device_type=device.device_type,
            traits=[trait.name for trait in device.traits],
            attributes=device.attributes(),
            state=device.state(),
            nicknames=list(device.nicknames),
            hardware=device.hardware,
            sw_version=device.sw_version,
            user_id=device.user_id,
        )
