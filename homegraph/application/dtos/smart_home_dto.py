"""
Smart Home DTOs - Application Layer

This module defines Data Transfer Objects (DTOs) for the assistant
protocol documents: device discovery (SYNC), state reads (QUERY) and
command writes (EXECUTE), plus the fulfillment envelope that carries them.
Field names follow the assistant's camelCase wire format through aliases.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SmartHomeIntent(str, Enum):
    """Intents accepted by the fulfillment endpoint."""

    SYNC = "action.devices.SYNC"
    QUERY = "action.devices.QUERY"
    EXECUTE = "action.devices.EXECUTE"
    DISCONNECT = "action.devices.DISCONNECT"


class ExecuteStatus(str, Enum):
    """Per-device outcome of an EXECUTE command."""

    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class _AliasedModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class DeviceInfoDTO(_AliasedModel):
    """Manufacturer details reported during SYNC."""

    manufacturer: str
    model: str
    hw_version: str = Field(alias="hwVersion")
    sw_version: str = Field(alias="swVersion")


class SyncDeviceDTO(_AliasedModel):
    """One device entry in a SYNC response."""

    id: str
    name: str
    device_type: str = Field(alias="deviceType", description="Device type name")
    type: str = Field(description="Assistant device type identifier")
    traits: List[str] = Field(description="Assistant trait identifiers")
    nicknames: List[str] = Field(default_factory=list)
    will_report_state: bool = Field(default=True, alias="willReportState")
    attributes: Dict[str, Any] = Field(default_factory=dict)
    device_info: DeviceInfoDTO = Field(alias="deviceInfo")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "tv-1",
                "name": "Living Room TV",
                "deviceType": "TV",
                "type": "action.devices.types.TV",
                "traits": [
                    "action.devices.traits.OnOff",
                    "action.devices.traits.Volume",
                ],
                "nicknames": [],
                "willReportState": True,
                "attributes": {
                    "commandOnlyOnOff": False,
                    "queryOnlyOnOff": False,
                    "volumeMaxLevel": 100,
                    "volumeCanMuteAndUnmute": True,
                    "levelStepSize": 1,
                    "commandOnlyVolume": False,
                    "volumeDefaultPercentage": 10,
                },
                "deviceInfo": {
                    "manufacturer": "homegraph",
                    "model": "LG",
                    "hwVersion": "1.0",
                    "swVersion": "1.0",
                },
            }
        },
    )


class SyncResponseDTO(_AliasedModel):
    """Payload of a SYNC response."""

    agent_user_id: str = Field(alias="agentUserId")
    devices: List[SyncDeviceDTO] = Field(default_factory=list)


class QueryResponseDTO(BaseModel):
    """Payload of a QUERY response, keyed by device id."""

    devices: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    model_config = {
        "json_schema_extra": {
            "example": {
                "devices": {
                    "tv-1": {
                        "online": True,
                        "status": "SUCCESS",
                        "on": False,
                        "currentVolume": 20,
                        "isMuted": False,
                    }
                }
            }
        }
    }


class ExecuteCommandDTO(_AliasedModel):
    """One command of an EXECUTE request, addressed to one or more devices."""

    device_ids: List[str] = Field(alias="deviceIds")
    command: str = Field(description="Command as '<Trait>.<verb>'")
    params: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "deviceIds": ["tv-1"],
                "command": "Volume.setVolume",
                "params": {"level": 20},
            }
        },
    )


class ExecuteResultDTO(_AliasedModel):
    """Outcome of one command against one device."""

    id: str
    status: ExecuteStatus
    states: Optional[Dict[str, Any]] = None
    error_code: Optional[str] = Field(default=None, alias="errorCode")


class ExecuteResponseDTO(BaseModel):
    """Payload of an EXECUTE response."""

    commands: List[ExecuteResultDTO] = Field(default_factory=list)


class FulfillmentInputDTO(BaseModel):
    """One intent carried by a fulfillment request."""

    intent: str
    payload: Dict[str, Any] = Field(default_factory=dict)


class FulfillmentRequestDTO(_AliasedModel):
    """Envelope posted by the assistant platform."""

    request_id: str = Field(alias="requestId")
    inputs: List[FulfillmentInputDTO] = Field(min_length=1)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "requestId": "ff36a3cc-ec34-11e6-b1a0-64510650abcf",
                "inputs": [{"intent": "action.devices.SYNC"}],
            }
        },
    )


class FulfillmentResponseDTO(_AliasedModel):
    """Envelope returned to the assistant platform."""

    request_id: str = Field(alias="requestId")
    payload: Dict[str, Any] = Field(default_factory=dict)
