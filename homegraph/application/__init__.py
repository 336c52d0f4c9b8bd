"""
Application Layer Package

This package contains the application-specific business rules
and use cases. It translates between the assistant's documents and
the domain devices, and orchestrates the device registry.
"""

# Re-export submodules
from homegraph.application import dtos, services, use_cases

__all__ = ["dtos", "services", "use_cases"]
