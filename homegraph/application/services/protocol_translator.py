"""
Protocol Translator - Application Layer

This module maps devices to and from the assistant protocol documents.
SYNC and QUERY entries are pure functions of a device; EXECUTE commands
are decoded into trait commands and applied through the device registry,
one device at a time, so a failure on one device never affects another.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from homegraph.application.dtos.smart_home_dto import (
    DeviceInfoDTO,
    ExecuteCommandDTO,
    ExecuteResultDTO,
    ExecuteStatus,
    SyncDeviceDTO,
)
from homegraph.domain.entities.device import Device, DeviceType, HardwareType
from homegraph.domain.entities.errors import (
    DeviceNotFound,
    DomainError,
    InvalidParams,
    UnsupportedCommand,
)
from homegraph.domain.entities.traits import TraitType
from homegraph.domain.services.device_registry import DeviceRegistry
from homegraph.shared import get_logger

logger = get_logger(__name__)

TRAIT_PREFIX = "action.devices.traits."
COMMAND_PREFIX = "action.devices.commands."

DEVICE_TYPE_IDENTIFIERS: Dict[DeviceType, str] = {
    DeviceType.SWITCH: "action.devices.types.SWITCH",
    DeviceType.LIGHT: "action.devices.types.LIGHT",
    DeviceType.GARAGE_DOOR: "action.devices.types.GARAGE",
    DeviceType.ROUTER: "action.devices.types.ROUTER",
    DeviceType.TV: "action.devices.types.TV",
}

HARDWARE_MODELS: Dict[HardwareType, str] = {
    HardwareType.ARDUINO: "Arduino",
    HardwareType.PI: "Raspberry Pi",
    HardwareType.LG: "LG",
    HardwareType.OTHER: "Other",
}

# Fully qualified assistant command names and the trait command they map to.
ASSISTANT_COMMANDS: Dict[str, Tuple[TraitType, str]] = {
    "OnOff": (TraitType.ON_OFF, "OnOff"),
    "OpenClose": (TraitType.OPEN_CLOSE, "OpenClose"),
    "Reboot": (TraitType.REBOOT, "reboot"),
    "setVolume": (TraitType.VOLUME, "setVolume"),
    "mute": (TraitType.VOLUME, "mute"),
    "volumeRelative": (TraitType.VOLUME, "volumeRelative"),
}


def to_sync(
    device: Device, manufacturer: str = "homegraph", hw_version: str = "1.0"
) -> SyncDeviceDTO:
    """Build the SYNC entry describing a device's identity and capabilities."""
    return SyncDeviceDTO(
        id=device.id,
        name=device.display_name,
        device_type=device.device_type.value,
        type=DEVICE_TYPE_IDENTIFIERS[device.device_type],
        traits=[TRAIT_PREFIX + trait.name for trait in device.traits],
        nicknames=list(device.nicknames),
        will_report_state=True,
        attributes=device.attributes(),
        device_info=DeviceInfoDTO(
            manufacturer=manufacturer,
            model=HARDWARE_MODELS[device.hardware],
            hw_version=hw_version,
            sw_version=device.sw_version,
        ),
    )


def to_query(device: Optional[Device]) -> Dict[str, Any]:
    """Build the QUERY entry for a device, or the offline entry if absent."""
    if device is None:
        return {
            "online": False,
            "status": ExecuteStatus.ERROR.value,
            "errorCode": DeviceNotFound.error_code,
        }
    return {"online": True, "status": ExecuteStatus.SUCCESS.value, **device.state()}


def parse_command(command: str) -> Tuple[str, str]:
    """
    Split a command into trait name and trait-local command name.

    Accepts ``<Trait>.<verb>`` as well as the assistant's fully qualified
    ``action.devices.commands.<Name>`` identifiers. The trait name is not
    checked here; an unknown trait surfaces as ``TraitNotPresent`` when
    the command reaches the device.

    Raises:
        UnsupportedCommand: If the command cannot be decoded
    """
    if command.startswith(COMMAND_PREFIX):
        name = command[len(COMMAND_PREFIX) :]
        if name not in ASSISTANT_COMMANDS:
            raise UnsupportedCommand("assistant", name)
        trait, verb = ASSISTANT_COMMANDS[name]
        return trait.value, verb

    trait_name, separator, verb = command.partition(".")
    if not separator or not trait_name or not verb:
        raise UnsupportedCommand(trait_name or "unknown", command)
    return trait_name, verb


async def from_execute(
    registry: DeviceRegistry,
    device_id: str,
    command: str,
    params: Optional[Mapping[str, Any]] = None,
) -> ExecuteResultDTO:
    """
    Apply one EXECUTE command to one device.

    Every domain error is reported as an ``ERROR`` result carrying the
    error's assistant code rather than raised.
    """
    try:
        if device_id not in registry:
            raise DeviceNotFound(device_id)
        trait, verb = parse_command(command)
        device = await registry.apply_command(device_id, trait, verb, params)
    except DomainError as e:
        logger.info(
            "execute.command_failed",
            device_id=device_id,
            command=command,
            error_type=type(e).__name__,
            error_code=e.error_code,
            error=e.message,
        )
        return ExecuteResultDTO(
            id=device_id, status=ExecuteStatus.ERROR, error_code=e.error_code
        )

    return ExecuteResultDTO(
        id=device_id,
        status=ExecuteStatus.SUCCESS,
        states={"online": True, **device.state()},
    )


async def execute_batch(
    registry: DeviceRegistry, commands: Iterable[ExecuteCommandDTO]
) -> List[ExecuteResultDTO]:
    """Apply every command to every addressed device, independently."""
    results: List[ExecuteResultDTO] = []
    for command in commands:
        for device_id in command.device_ids:
            results.append(
                await from_execute(registry, device_id, command.command, command.params)
            )
    return results


def parse_execute_payload(payload: Mapping[str, Any]) -> List[ExecuteCommandDTO]:
    """
    Normalise an EXECUTE payload into a flat list of commands.

    Accepts the flat ``{deviceIds, command, params}`` form as well as the
    fulfillment form ``{devices: [{id}], execution: [{command, params}]}``.

    Raises:
        InvalidParams: If the payload matches neither form
    """
    raw_commands = payload.get("commands")
    if not isinstance(raw_commands, list):
        raise InvalidParams("EXECUTE payload must contain a 'commands' list")

    commands: List[ExecuteCommandDTO] = []
    try:
        for raw in raw_commands:
            if not isinstance(raw, Mapping):
                raise InvalidParams("Each EXECUTE command must be an object")
            if "execution" not in raw:
                commands.append(ExecuteCommandDTO.model_validate(raw))
                continue
            device_ids = [device["id"] for device in raw.get("devices", [])]
            for execution in raw["execution"]:
                commands.append(
                    ExecuteCommandDTO(
                        device_ids=device_ids,
                        command=execution["command"],
                        params=execution.get("params") or {},
                    )
                )
    except (ValidationError, KeyError, TypeError, AttributeError) as e:
        raise InvalidParams(f"Malformed EXECUTE payload: {e}") from e
    return commands


def render_execute_results(results: Iterable[ExecuteResultDTO]) -> List[Dict[str, Any]]:
    """Render results as ``{id, ids, status, states?|errorCode?}`` entries."""
    rendered: List[Dict[str, Any]] = []
    for result in results:
        entry: Dict[str, Any] = {
            "id": result.id,
            "ids": [result.id],
            "status": result.status.value,
        }
        if result.states is not None:
            entry["states"] = result.states
        if result.error_code is not None:
            entry["errorCode"] = result.error_code
        rendered.append(entry)
    return rendered
