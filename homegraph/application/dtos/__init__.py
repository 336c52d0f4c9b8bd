"""
DTOs Package - Application Layer

This package contains Data Transfer Objects (DTOs) used for data exchange
between the application layer and the presentation layer.
"""

from .device_dto import DeviceCreateDTO, DeviceResponseDTO
from .smart_home_dto import (
    DeviceInfoDTO,
    ExecuteCommandDTO,
    ExecuteResponseDTO,
    ExecuteResultDTO,
    ExecuteStatus,
    FulfillmentInputDTO,
    FulfillmentRequestDTO,
    FulfillmentResponseDTO,
    QueryResponseDTO,
    SmartHomeIntent,
    SyncDeviceDTO,
    SyncResponseDTO,
)

__all__ = [
    "DeviceCreateDTO",
    "DeviceResponseDTO",
    "SmartHomeIntent",
    "ExecuteStatus",
    "DeviceInfoDTO",
    "SyncDeviceDTO",
    "SyncResponseDTO",
    "QueryResponseDTO",
    "ExecuteCommandDTO",
    "ExecuteResultDTO",
    "ExecuteResponseDTO",
    "FulfillmentInputDTO",
    "FulfillmentRequestDTO",
    "FulfillmentResponseDTO",
]
