from __future__ import annotations

import pytest
from fastapi import HTTPException

from homegraph.application.dtos.smart_home_dto import (
    FulfillmentRequestDTO,
    FulfillmentResponseDTO,
)
from homegraph.application.use_cases.smart_home_use_cases import FulfillmentUseCase
from homegraph.presentation.controllers.smart_home_controller import fulfill


class _StubFulfillment(FulfillmentUseCase):
    def __init__(self, error: Exception | None = None):
        self.error = error

    async def execute(self, request, user_id=None) -> FulfillmentResponseDTO:
        if self.error:
            raise self.error
        return FulfillmentResponseDTO(
            request_id=request.request_id, payload={"devices": {}}
        )


def _request() -> FulfillmentRequestDTO:
    return FulfillmentRequestDTO.model_validate(
        {"requestId": "req-7", "inputs": [{"intent": "action.devices.QUERY"}]}
    )


@pytest.mark.asyncio
async def test_fulfill_returns_use_case_response() -> None:
    response = await fulfill(_request(), fulfillment_use_case=_StubFulfillment())

    assert response.request_id == "req-7"
    assert response.model_dump(by_alias=True) == {
        "requestId": "req-7",
        "payload": {"devices": {}},
    }


@pytest.mark.asyncio
async def test_fulfill_handles_unexpected_errors() -> None:
    with pytest.raises(HTTPException) as exc:
        await fulfill(
            _request(), fulfillment_use_case=_StubFulfillment(RuntimeError("boom"))
        )
    assert exc.value.status_code == 500
