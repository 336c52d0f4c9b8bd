"""
Domain Entities - Traits

This module defines the fixed catalog of device capability traits. Each
trait variant declares the schema of its mutable state, the static
capability attributes advertised to the assistant and the command
vocabulary it accepts. Traits are values: applying a command returns a new
state payload and never mutates the trait itself.
"""

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Type, Union

from homegraph.domain.entities.errors import (
    InvalidParams,
    SchemaMismatch,
    UnsupportedCommand,
)

MAX_VOLUME = 100
DEFAULT_VOLUME = 10
VOLUME_STEP = 1


class TraitType(str, Enum):
    """Capability variants a device can expose."""

    ON_OFF = "OnOff"
    OPEN_CLOSE = "OpenClose"
    REBOOT = "Reboot"
    VOLUME = "Volume"


@dataclass(frozen=True)
class FieldSpec:
    """Type and range constraints for a state field or command parameter."""

    kind: type
    default: Any = None
    required: bool = False
    optional: bool = False
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    choices: Optional[Tuple[Any, ...]] = None

    def check(self, value: Any) -> Optional[str]:
        """Return a description of the problem with ``value``, if any."""
        if self.kind is bool:
            if not isinstance(value, bool):
                return "must be a boolean"
        elif self.kind is int:
            if isinstance(value, bool) or not isinstance(value, int):
                return "must be an integer"
        elif not isinstance(value, self.kind):
            return f"must be of type {self.kind.__name__}"

        if self.minimum is not None and value < self.minimum:
            return f"must be at least {self.minimum}"
        if self.maximum is not None and value > self.maximum:
            return f"must be at most {self.maximum}"
        if self.choices is not None and value not in self.choices:
            return f"must be one of {list(self.choices)}"
        return None


class Trait:
    """Base class for trait variants.

    Subclasses fill in the class-level catalog entries and implement
    ``_execute`` for their command vocabulary.
    """

    trait_type: ClassVar[TraitType]
    schema: ClassVar[Dict[str, FieldSpec]] = {}
    static_attributes: ClassVar[Dict[str, Any]] = {}
    command_params: ClassVar[Dict[str, Dict[str, FieldSpec]]] = {}

    __slots__ = ("_state",)

    def __init__(self, state: Optional[Mapping[str, Any]] = None) -> None:
        self._state = self._validate_state({} if state is None else state)

    @property
    def name(self) -> str:
        return self.trait_type.value

    @property
    def commands(self) -> Tuple[str, ...]:
        return tuple(self.command_params)

    def attributes(self) -> Dict[str, Any]:
        """Static capability description used for SYNC responses."""
        return copy.deepcopy(self.static_attributes)

    def state(self) -> Dict[str, Any]:
        """Current mutable fields used for QUERY responses."""
        return dict(self._state)

    def with_state(self, state: Mapping[str, Any]) -> "Trait":
        return type(self)(state)

    def apply_command(
        self, command: str, params: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Validate a command and compute the resulting state.

        Args:
            command: Trait-local command name (e.g. ``setVolume``)
            params: Command parameters

        Returns:
            The new state payload. The trait itself is left untouched.

        Raises:
            UnsupportedCommand: If the command is not in the vocabulary
            InvalidParams: If the parameters do not match the command
        """
        if command not in self.command_params:
            raise UnsupportedCommand(self.name, command)
        validated = self._validate_params(command, {} if params is None else params)
        return self._execute(command, validated)

    def _execute(self, command: str, params: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    @classmethod
    def _validate_state(cls, raw: Any) -> Dict[str, Any]:
        name = cls.trait_type.value
        if not isinstance(raw, Mapping):
            raise SchemaMismatch(
                f"State for trait {name} must be a mapping",
                details={"trait": name},
            )

        errors = [f"unknown field '{key}'" for key in raw if key not in cls.schema]
        state: Dict[str, Any] = {}
        for field_name, spec in cls.schema.items():
            value = raw.get(field_name, spec.default)
            if value is None:
                if spec.optional:
                    continue
                errors.append(f"'{field_name}' must not be null")
                continue
            problem = spec.check(value)
            if problem:
                errors.append(f"'{field_name}' {problem}")
            else:
                state[field_name] = value

        if errors:
            raise SchemaMismatch(
                f"Invalid state for trait {name}: {'; '.join(errors)}",
                details={"trait": name, "errors": errors},
            )
        return state

    def _validate_params(
        self, command: str, params: Any
    ) -> Dict[str, Any]:
        if not isinstance(params, Mapping):
            raise InvalidParams(
                f"Parameters for {self.name}.{command} must be a mapping",
                details={"trait": self.name, "command": command},
            )

        specs = self.command_params[command]
        errors = [f"unexpected parameter '{key}'" for key in params if key not in specs]
        validated: Dict[str, Any] = {}
        for param, spec in specs.items():
            if param not in params:
                if spec.required:
                    errors.append(f"missing parameter '{param}'")
                elif spec.default is not None:
                    validated[param] = spec.default
                continue
            problem = spec.check(params[param])
            if problem:
                errors.append(f"'{param}' {problem}")
            else:
                validated[param] = params[param]

        if errors:
            raise InvalidParams(
                f"Invalid parameters for {self.name}.{command}: {'; '.join(errors)}",
                details={"trait": self.name, "command": command, "errors": errors},
            )
        return validated

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Trait):
            return NotImplemented
        return type(self) is type(other) and self._state == other._state

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._state!r})"


class OnOffTrait(Trait):
    trait_type = TraitType.ON_OFF
    schema = {"on": FieldSpec(bool, default=False)}
    static_attributes = {"commandOnlyOnOff": False, "queryOnlyOnOff": False}
    command_params = {
        "OnOff": {"on": FieldSpec(bool, required=True)},
        "on": {},
        "off": {},
    }

    def _execute(self, command: str, params: Dict[str, Any]) -> Dict[str, Any]:
        if command == "OnOff":
            on = params["on"]
        else:
            on = command == "on"
        return {**self._state, "on": on}


class OpenCloseTrait(Trait):
    trait_type = TraitType.OPEN_CLOSE
    schema = {
        "open": FieldSpec(bool, default=False),
        "openPercent": FieldSpec(int, optional=True, minimum=0, maximum=100),
    }
    static_attributes = {
        "discreteOnlyOpenClose": True,
        "openDirection": ["UP", "DOWN"],
    }
    # Discrete-only doors accept fully open or fully closed.
    command_params = {
        "OpenClose": {"openPercent": FieldSpec(int, required=True, choices=(0, 100))},
    }

    @classmethod
    def _validate_state(cls, raw: Any) -> Dict[str, Any]:
        state = super()._validate_state(raw)
        if "openPercent" in state and state["open"] != (state["openPercent"] > 0):
            raise SchemaMismatch(
                "Invalid state for trait OpenClose: 'open' disagrees with "
                "'openPercent'",
                details={"trait": cls.trait_type.value, "state": state},
            )
        return state

    def _execute(self, command: str, params: Dict[str, Any]) -> Dict[str, Any]:
        percent = params["openPercent"]
        return {"open": percent > 0, "openPercent": percent}


class RebootTrait(Trait):
    trait_type = TraitType.REBOOT
    command_params = {"reboot": {}}

    def _execute(self, command: str, params: Dict[str, Any]) -> Dict[str, Any]:
        return {}


class VolumeTrait(Trait):
    trait_type = TraitType.VOLUME
    schema = {
        "currentVolume": FieldSpec(
            int, default=DEFAULT_VOLUME, minimum=0, maximum=MAX_VOLUME
        ),
        "isMuted": FieldSpec(bool, default=False),
    }
    static_attributes = {
        "volumeMaxLevel": MAX_VOLUME,
        "volumeCanMuteAndUnmute": True,
        "levelStepSize": VOLUME_STEP,
        "commandOnlyVolume": False,
        "volumeDefaultPercentage": DEFAULT_VOLUME,
    }
    command_params = {
        "setVolume": {
            "level": FieldSpec(int, required=True, minimum=0, maximum=MAX_VOLUME)
        },
        "mute": {"mute": FieldSpec(bool, default=True)},
        "volumeRelative": {"relativeSteps": FieldSpec(int, required=True)},
    }

    def _execute(self, command: str, params: Dict[str, Any]) -> Dict[str, Any]:
        state = dict(self._state)
        if command == "setVolume":
            state["currentVolume"] = params["level"]
        elif command == "mute":
            state["isMuted"] = params["mute"]
        else:
            level = state["currentVolume"] + params["relativeSteps"] * VOLUME_STEP
            state["currentVolume"] = max(0, min(MAX_VOLUME, level))
        return state


TRAIT_CLASSES: Dict[TraitType, Type[Trait]] = {
    cls.trait_type: cls
    for cls in (OnOffTrait, OpenCloseTrait, RebootTrait, VolumeTrait)
}


def parse_trait_type(value: Union[TraitType, str]) -> TraitType:
    """Resolve a trait name, raising ``SchemaMismatch`` for unknown names."""
    try:
        return TraitType(value)
    except ValueError:
        raise SchemaMismatch(
            f"Unknown trait '{value}'", details={"trait": str(value)}
        ) from None


def build_trait(
    trait: Union[TraitType, str], state: Optional[Mapping[str, Any]] = None
) -> Trait:
    """Construct the catalog trait for ``trait`` from a raw state map."""
    return TRAIT_CLASSES[parse_trait_type(trait)](state)
