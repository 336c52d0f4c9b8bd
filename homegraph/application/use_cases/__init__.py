"""
Use Cases Package - Application Layer

This package contains use cases that implement the business logic
of the application. Use cases orchestrate the flow of data to and from
the device registry and implement the business rules of the application.
"""

from .device_use_cases import (
    GetDeviceUseCase,
    ListDevicesUseCase,
    ProvisionDeviceUseCase,
    RemoveDeviceUseCase,
)
from .smart_home_use_cases import (
    ExecuteCommandsUseCase,
    FulfillmentUseCase,
    QueryDevicesUseCase,
    SyncDevicesUseCase,
)

__all__ = [
    "ListDevicesUseCase",
    "GetDeviceUseCase",
    "ProvisionDeviceUseCase",
    "RemoveDeviceUseCase",
    "SyncDevicesUseCase",
    "QueryDevicesUseCase",
    "ExecuteCommandsUseCase",
    "FulfillmentUseCase",
]
