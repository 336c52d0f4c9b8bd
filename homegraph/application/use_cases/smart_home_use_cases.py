"""
Smart Home Use Cases - Application Layer

This module defines the use cases answering the assistant's SYNC, QUERY
and EXECUTE intents, and the fulfillment use case dispatching a request
envelope to them.
"""

from typing import Any, Dict, List, Optional

from dependency_injector.wiring import Provide, inject

from homegraph.application.dtos.smart_home_dto import (
    ExecuteCommandDTO,
    ExecuteResponseDTO,
    ExecuteStatus,
    FulfillmentRequestDTO,
    FulfillmentResponseDTO,
    QueryResponseDTO,
    SmartHomeIntent,
    SyncResponseDTO,
)
from homegraph.application.services.protocol_translator import (
    execute_batch,
    parse_execute_payload,
    render_execute_results,
    to_query,
    to_sync,
)
from homegraph.domain.entities.errors import InvalidParams
from homegraph.domain.services.device_registry import DeviceRegistry
from homegraph.shared import get_logger

logger = get_logger(__name__)


class SyncDevicesUseCase:
    """Use case describing registered devices to the assistant."""

    @inject
    def __init__(
        self,
        device_registry: DeviceRegistry = Provide["device_registry"],
        agent_user_id: str = Provide["config.service.agent_user_id"],
        manufacturer: str = Provide["config.service.manufacturer"],
    ):
        self.device_registry = device_registry
        self.agent_user_id = agent_user_id
        self.manufacturer = manufacturer

    async def execute(self, user_id: Optional[str] = None) -> SyncResponseDTO:
        """
        Build the SYNC payload.

        Args:
            user_id: Restrict the response to one account's devices

        Returns:
            SyncResponseDTO with one entry per device
        """
        devices = self.device_registry.list_devices(user_id=user_id)
        logger.info("sync.requested", user_id=user_id, device_count=len(devices))
        return SyncResponseDTO(
            agent_user_id=user_id or self.agent_user_id,
            devices=[
                to_sync(device, manufacturer=self.manufacturer) for device in devices
            ],
        )


class QueryDevicesUseCase:
    """Use case reporting the current state of devices."""

    @inject
    def __init__(
        self, device_registry: DeviceRegistry = Provide["device_registry"]
    ):
        self.device_registry = device_registry

    async def execute(self, device_ids: List[str]) -> QueryResponseDTO:
        """Build the QUERY payload; unknown ids are reported offline."""
        devices = {
            device_id: to_query(self.device_registry.find(device_id))
            for device_id in device_ids
        }
        logger.info("query.requested", device_count=len(device_ids))
        return QueryResponseDTO(devices=devices)


class ExecuteCommandsUseCase:
    """Use case applying a batch of assistant commands."""

    @inject
    def __init__(
        self, device_registry: DeviceRegistry = Provide["device_registry"]
    ):
        self.device_registry = device_registry

    async def execute(self, commands: List[ExecuteCommandDTO]) -> ExecuteResponseDTO:
        """
        Apply each command to each addressed device.

        Failures are reported per device and never stop the rest of the batch.
        """
        results = await execute_batch(self.device_registry, commands)
        failed = sum(1 for result in results if result.status is ExecuteStatus.ERROR)
        logger.info(
            "execute.completed",
            command_count=len(commands),
            result_count=len(results),
            failed=failed,
        )
        return ExecuteResponseDTO(commands=results)


class FulfillmentUseCase:
    """Use case dispatching a fulfillment envelope to the intent use cases."""

    @inject
    def __init__(
        self,
        sync_use_case: SyncDevicesUseCase = Provide["sync_devices_use_case"],
        query_use_case: QueryDevicesUseCase = Provide["query_devices_use_case"],
        execute_use_case: ExecuteCommandsUseCase = Provide[
            "execute_commands_use_case"
        ],
    ):
        self.sync_use_case = sync_use_case
        self.query_use_case = query_use_case
        self.execute_use_case = execute_use_case

    async def execute(
        self, request: FulfillmentRequestDTO, user_id: Optional[str] = None
    ) -> FulfillmentResponseDTO:
        """
        Answer the first intent of a fulfillment request.

        Malformed payloads and unknown intents are answered with a
        top-level ``errorCode`` instead of raising.
        """
        request_input = request.inputs[0]
        logger.info(
            "fulfillment.received",
            request_id=request.request_id,
            intent=request_input.intent,
        )

        try:
            payload = await self._dispatch(
                request_input.intent, request_input.payload, user_id
            )
        except InvalidParams as e:
            logger.warning(
                "fulfillment.malformed_payload",
                request_id=request.request_id,
                intent=request_input.intent,
                error=e.message,
            )
            payload = {"errorCode": "protocolError"}

        return FulfillmentResponseDTO(request_id=request.request_id, payload=payload)

    async def _dispatch(
        self, intent: str, payload: Dict[str, Any], user_id: Optional[str]
    ) -> Dict[str, Any]:
        if intent == SmartHomeIntent.SYNC.value:
            sync = await self.sync_use_case.execute(user_id=user_id)
            return sync.model_dump(by_alias=True)

        if intent == SmartHomeIntent.QUERY.value:
            raw_devices = payload.get("devices")
            if not isinstance(raw_devices, list):
                raise InvalidParams("QUERY payload must contain a 'devices' list")
            try:
                device_ids = [str(device["id"]) for device in raw_devices]
            except (KeyError, TypeError) as e:
                raise InvalidParams(f"Malformed QUERY payload: {e}") from e
            query = await self.query_use_case.execute(device_ids)
            return query.model_dump()

        if intent == SmartHomeIntent.EXECUTE.value:
            commands = parse_execute_payload(payload)
            execute = await self.execute_use_case.execute(commands)
            return {"commands": render_execute_results(execute.commands)}

        if intent == SmartHomeIntent.DISCONNECT.value:
            return {}

        logger.warning("fulfillment.unknown_intent", intent=intent)
        return {"errorCode": "notSupported"}
