"""
Homegraph Root Module

Device registry for home automation hardware, exposed to a smart home
assistant through the SYNC, QUERY and EXECUTE intents.

Layer Structure:
- Domain: Devices, traits, attribute aggregation and the device registry
- Application: Use cases, DTOs and the assistant protocol translation
- Infrastructure: Device store backends (MongoDB, in-memory)
- Presentation: FastAPI routers for fulfillment and device management
- Shared: Cross-cutting concerns and shared utilities
- Main: Composition root, application entry point and configuration
"""
