"""
Devices Router - Presentation Layer

This module defines the FastAPI router for device management endpoints.
"""

from typing import List, Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Query, status

from homegraph.application.dtos.device_dto import DeviceCreateDTO, DeviceResponseDTO
from homegraph.application.use_cases.device_use_cases import (
    GetDeviceUseCase,
    ListDevicesUseCase,
    ProvisionDeviceUseCase,
    RemoveDeviceUseCase,
)
from homegraph.domain.entities.errors import (
    AttributeCollision,
    DeviceNotFound,
    DeviceTypeMismatch,
    SchemaMismatch,
)
from homegraph.shared import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/devices", tags=["Devices"])


@router.get("/", response_model=List[DeviceResponseDTO])
@inject
async def list_devices(
    user_id: Optional[str] = Query(
        default=None, description="Only return devices owned by this account"
    ),
    list_devices_use_case: ListDevicesUseCase = Depends(
        Provide["list_devices_use_case"]
    ),
) -> List[DeviceResponseDTO]:
    """List registered devices with their aggregated attributes and state."""
    try:
        return await list_devices_use_case.execute(user_id=user_id)
    except Exception as e:
        logger.error("devices.list_failed", error=str(e), exc_info=e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )


@router.get("/{device_id}", response_model=DeviceResponseDTO)
@inject
async def get_device(
    device_id: str,
    get_device_use_case: GetDeviceUseCase = Depends(Provide["get_device_use_case"]),
) -> DeviceResponseDTO:
    """Get a single device by its ID."""
    try:
        return await get_device_use_case.execute(device_id)
    except DeviceNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(
            "devices.retrieval_failed", device_id=device_id, error=str(e), exc_info=e
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )


@router.post(
    "/",
    response_model=DeviceResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def provision_device(
    device_dto: DeviceCreateDTO,
    provision_device_use_case: ProvisionDeviceUseCase = Depends(
        Provide["provision_device_use_case"]
    ),
) -> DeviceResponseDTO:
    """
    Provision a device.

    The device receives the trait set fixed by its type; ``traits`` only
    seeds their initial state. Posting an existing ID replaces the device.
    """
    try:
        return await provision_device_use_case.execute(device_dto)
    except (SchemaMismatch, DeviceTypeMismatch, AttributeCollision) as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        )
    except Exception as e:
        logger.error(
            "devices.provision_failed",
            device_id=device_dto.id,
            error=str(e),
            exc_info=e,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )


@router.delete("/{device_id}", status_code=status.HTTP_204_NO_CONTENT)
@inject
async def remove_device(
    device_id: str,
    remove_device_use_case: RemoveDeviceUseCase = Depends(
        Provide["remove_device_use_case"]
    ),
) -> None:
    """Remove a device and delete its persisted record."""
    try:
        await remove_device_use_case.execute(device_id)
    except DeviceNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(
            "devices.remove_failed", device_id=device_id, error=str(e), exc_info=e
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )
