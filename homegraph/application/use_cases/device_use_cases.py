"""
Device Use Cases - Application Layer

This module defines use cases for device operations.
It orchestrates the flow of data to and from the device registry
and implements the business rules for device management.
"""

from typing import List, Optional

from dependency_injector.wiring import Provide, inject

from homegraph.application.dtos.device_dto import DeviceCreateDTO, DeviceResponseDTO
from homegraph.domain.entities.device import Device
from homegraph.domain.services.device_registry import DeviceRegistry
from homegraph.shared import get_logger

logger = get_logger(__name__)


class ListDevicesUseCase:
    """Use case for listing registered devices."""

    @inject
    def __init__(
        self, device_registry: DeviceRegistry = Provide["device_registry"]
    ):
        self.device_registry = device_registry

    async def execute(self, user_id: Optional[str] = None) -> List[DeviceResponseDTO]:
        devices = self.device_registry.list_devices(user_id=user_id)
        return [DeviceResponseDTO.from_entity(device) for device in devices]


class GetDeviceUseCase:
    """Use case for retrieving a single device."""

    @inject
    def __init__(
        self, device_registry: DeviceRegistry = Provide["device_registry"]
    ):
        self.device_registry = device_registry

    async def execute(self, device_id: str) -> DeviceResponseDTO:
        """
        Get a device by its ID.

        Raises:
            DeviceNotFound: If the device does not exist
        """
        return DeviceResponseDTO.from_entity(self.device_registry.get(device_id))


class ProvisionDeviceUseCase:
    """Use case for registering a new device or replacing an existing one."""

    @inject
    def __init__(
        self, device_registry: DeviceRegistry = Provide["device_registry"]
    ):
        self.device_registry = device_registry

    async def execute(self, device_dto: DeviceCreateDTO) -> DeviceResponseDTO:
        """
        Build the device from the DTO and write it through the registry.

        Args:
            device_dto: The device create DTO

        Returns:
            The stored device as a response DTO

        Raises:
            SchemaMismatch: If an initial trait state is malformed
            DeviceTypeMismatch: If a trait does not belong to the device type
            PersistenceError: If the record cannot be written
        """
        device = Device.provision(
            device_dto.id,
            device_dto.name,
            device_dto.device_type,
            trait_states=device_dto.traits,
            nicknames=device_dto.nicknames,
            hardware=device_dto.hardware,
            sw_version=device_dto.sw_version,
            user_id=device_dto.user_id,
        )
        stored = await self.device_registry.upsert(device)
        logger.info(
            "devices.provisioned",
            device_id=stored.id,
            device_type=stored.device_type.value,
        )
        return DeviceResponseDTO.from_entity(stored)


class RemoveDeviceUseCase:
    """Use case for removing a device and its persisted record."""

    @inject
    def __init__(
        self, device_registry: DeviceRegistry = Provide["device_registry"]
    ):
        self.device_registry = device_registry

    async def execute(self, device_id: str) -> None:
        """
        Delete a device by its ID.

        Raises:
            DeviceNotFound: If the device does not exist
        """
        await self.device_registry.remove(device_id)
