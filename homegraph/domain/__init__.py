"""
Domain Layer Package

This package contains the device and trait model, the rules that tie
trait sets to device types, and the registry applying commands. It has
no dependencies on external frameworks or infrastructure concerns.
"""

# Re-export submodules
from homegraph.domain import entities, repositories, services

__all__ = ["entities", "repositories", "services"]
