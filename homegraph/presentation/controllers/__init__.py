"""
Controllers Package - Presentation Layer

This package contains FastAPI controllers (routers) that handle
HTTP requests and responses. Controllers are responsible for
input validation, error handling, and mapping between API DTOs
and application layer use cases.
"""

from .devices_controller import router as devices_router
from .smart_home_controller import router as smart_home_router

__all__ = ["devices_router", "smart_home_router"]
