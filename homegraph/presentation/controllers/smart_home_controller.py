"""
Smart Home Router - Presentation Layer

This module defines the FastAPI router receiving the assistant's
fulfillment requests (SYNC, QUERY, EXECUTE, DISCONNECT).
"""

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, status

from homegraph.application.dtos.smart_home_dto import (
    FulfillmentRequestDTO,
    FulfillmentResponseDTO,
)
from homegraph.application.use_cases.smart_home_use_cases import FulfillmentUseCase
from homegraph.shared import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/smarthome", tags=["Smart Home"])


@router.post(
    "",
    response_model=FulfillmentResponseDTO,
    response_model_by_alias=True,
)
@inject
async def fulfill(
    request: FulfillmentRequestDTO,
    fulfillment_use_case: FulfillmentUseCase = Depends(
        Provide["fulfillment_use_case"]
    ),
) -> FulfillmentResponseDTO:
    """
    Answer an assistant fulfillment request.

    Per-device failures are reported inside the payload; only unexpected
    failures produce an HTTP error.
    """
    try:
        return await fulfillment_use_case.execute(request)
    except Exception as e:
        logger.error(
            "fulfillment.failed",
            request_id=request.request_id,
            error=str(e),
            exc_info=e,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )
