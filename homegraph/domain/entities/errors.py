"""
Domain Errors

This module defines custom error classes for domain-specific exceptions.
Each error carries the assistant error code reported back in protocol
responses when the failure belongs to a single device.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for domain errors."""

    error_code = "hardError"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class SchemaMismatch(DomainError):
    """Raised when a trait state or device record does not match its schema."""

    error_code = "protocolError"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class DeviceTypeMismatch(DomainError):
    """Raised when a device's traits do not match its declared type."""

    error_code = "protocolError"

    def __init__(
        self,
        device_type: str,
        expected: Any,
        actual: Any,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.device_type = device_type
        self.expected = list(expected)
        self.actual = list(actual)
        message = (
            f"Device type {device_type} requires traits {self.expected}, "
            f"got {self.actual}"
        )
        super().__init__(message, details)


class AttributeCollision(DomainError):
    """Raised when two traits of one device contribute the same key."""

    error_code = "protocolError"

    def __init__(
        self,
        key: str,
        trait_a: str,
        trait_b: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.key = key
        self.trait_a = trait_a
        self.trait_b = trait_b
        message = f"Key '{key}' is contributed by both {trait_a} and {trait_b}"
        super().__init__(message, details)


class UnsupportedCommand(DomainError):
    """Raised when a trait does not recognise a command name."""

    error_code = "notSupported"

    def __init__(
        self, trait: str, command: str, details: Optional[Dict[str, Any]] = None
    ):
        self.trait = trait
        self.command = command
        message = f"Trait {trait} does not support command '{command}'"
        super().__init__(message, details)


class InvalidParams(DomainError):
    """Raised when command parameters have the wrong shape or value."""

    error_code = "valueOutOfRange"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class TraitNotPresent(DomainError):
    """Raised when a command addresses a trait the device does not carry."""

    error_code = "functionNotSupported"

    def __init__(
        self, device_id: str, trait: str, details: Optional[Dict[str, Any]] = None
    ):
        self.device_id = device_id
        self.trait = trait
        message = f"Device {device_id} does not carry trait {trait}"
        super().__init__(message, details)


class DeviceNotFound(DomainError):
    """Raised when a device cannot be found in the registry."""

    error_code = "deviceNotFound"

    def __init__(self, device_id: str, details: Optional[Dict[str, Any]] = None):
        self.device_id = device_id
        message = f"Device with ID {device_id} not found"
        super().__init__(message, details)


class PersistenceError(DomainError):
    """Raised when the device store fails to read or write a record."""

    error_code = "hardError"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
