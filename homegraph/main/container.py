"""
Dependency container injection module - Main Layer

This module implements the dependency injection container
to simplify the management and lifecycle of dependencies
in the application.
"""

from contextlib import asynccontextmanager

from dependency_injector import containers, providers

from homegraph.application.use_cases.device_use_cases import (
    GetDeviceUseCase,
    ListDevicesUseCase,
    ProvisionDeviceUseCase,
    RemoveDeviceUseCase,
)
from homegraph.application.use_cases.smart_home_use_cases import (
    ExecuteCommandsUseCase,
    FulfillmentUseCase,
    QueryDevicesUseCase,
    SyncDevicesUseCase,
)
from homegraph.domain.services.device_registry import DeviceRegistry
from homegraph.infrastructure.database import MongoDatabase
from homegraph.infrastructure.repositories import (
    InMemoryDeviceStore,
    MongoDeviceStore,
)
from homegraph.shared import EnumStorageBackend, get_logger

from .config import AppSettings

logger = get_logger(__name__)


def _enum_value(value):
    return value.value if hasattr(value, "value") else str(value)


class AppContainer(containers.DeclarativeContainer):
    """Composition Root using dependency-injector."""

    wiring_config = containers.WiringConfiguration(
        packages=["..presentation", "..application"]
    )

    # Settings
    config = providers.Configuration()

    # Infrastructure
    mongo_database = providers.Singleton(
        MongoDatabase,
        mongo_uri=config.database.mongo_uri,
        db_name=config.database.database_name,
    )

    device_store = providers.Selector(
        providers.Callable(_enum_value, config.storage.backend),
        mongo=providers.Singleton(
            MongoDeviceStore,
            mongo_database=mongo_database,
            collection_name=config.storage.mongo_collection,
        ),
        memory=providers.Singleton(InMemoryDeviceStore),
    )

    # Domain
    device_registry = providers.Singleton(
        DeviceRegistry,
        device_store=device_store,
        collection=config.storage.collection,
    )

    # Application (use cases)
    list_devices_use_case = providers.Factory(
        ListDevicesUseCase,
        device_registry=device_registry,
    )

    get_device_use_case = providers.Factory(
        GetDeviceUseCase,
        device_registry=device_registry,
    )

    provision_device_use_case = providers.Factory(
        ProvisionDeviceUseCase,
        device_registry=device_registry,
    )

    remove_device_use_case = providers.Factory(
        RemoveDeviceUseCase,
        device_registry=device_registry,
    )

    sync_devices_use_case = providers.Factory(
        SyncDevicesUseCase,
        device_registry=device_registry,
        agent_user_id=config.service.agent_user_id,
        manufacturer=config.service.manufacturer,
    )

    query_devices_use_case = providers.Factory(
        QueryDevicesUseCase,
        device_registry=device_registry,
    )

    execute_commands_use_case = providers.Factory(
        ExecuteCommandsUseCase,
        device_registry=device_registry,
    )

    fulfillment_use_case = providers.Factory(
        FulfillmentUseCase,
        sync_use_case=sync_devices_use_case,
        query_use_case=query_devices_use_case,
        execute_use_case=execute_commands_use_case,
    )


# -------------------------
# Global Container Instance
# -------------------------
_app_container: AppContainer | None = None


def init_container(settings: AppSettings) -> AppContainer:
    """Initialize global container with application settings."""

    global _app_container

    container = AppContainer()
    container.config.from_pydantic(settings)
    _app_container = container
    return container


def get_container() -> AppContainer:
    """Get the initialized global container."""

    if _app_container is None:
        raise RuntimeError("Container has not been initialized yet")

    return _app_container


@asynccontextmanager
async def app_lifespan():
    """
    Centralized lifecycle management for external resources.

    On startup the Mongo indexes are created (Mongo backend only) and the
    device registry is populated from the store. On shutdown the Mongo
    client is closed.
    """
    container = get_container()
    use_mongo = (
        _enum_value(container.config.storage.backend())
        == EnumStorageBackend.MONGO.value
    )

    mongo_database = container.mongo_database() if use_mongo else None

    try:
        if mongo_database is not None:
            logger.info("container.mongo.ensure_connection")
            await mongo_database.create_indexes(
                container.config.storage.mongo_collection()
            )

        report = await container.device_registry().load()
        logger.info(
            "container.resources.initialized",
            devices_loaded=len(report.loaded),
            records_skipped=len(report.skipped),
        )
        yield container

    finally:
        if mongo_database is not None:
            logger.info("container.mongo.close")
            mongo_database.close()

        logger.info("container.resources.shutdown")
