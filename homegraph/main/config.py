"""
Application Settings - Main Layer

Use Pydantic Settings for configuration management.
This module handles configuration settings provided using
environment variables, .env files and default values.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from homegraph.shared import EnumEnvironment, EnumLogLevel, EnumStorageBackend


class ServiceSettings(BaseSettings):
    """HTTP service and assistant-facing identity settings."""

    title: str = Field(default="Homegraph", description="Service title")
    description: str = Field(
        default="Home automation device registry speaking the smart home "
        "SYNC, QUERY and EXECUTE intents",
        description="Service description",
    )
    version: str = Field(default="1.0.0", description="Service version")
    host: str = Field(default="0.0.0.0", description="Host to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")
    reload: bool = Field(
        default=False, description="Enable auto-reload for development"
    )
    agent_user_id: str = Field(
        default="homegraph-user",
        description="agentUserId reported in SYNC when no account is given",
    )
    manufacturer: str = Field(
        default="homegraph", description="Manufacturer reported in SYNC deviceInfo"
    )

    model_config = SettingsConfigDict(
        env_prefix="SERVICE_", case_sensitive=False, extra="ignore"
    )


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    mongo_uri: str = Field(
        default="mongodb://localhost:27017/homegraph",
        description="MongoDB connection URI",
    )
    database_name: str = Field(
        default="homegraph", description="Name of the MongoDB database"
    )

    model_config = SettingsConfigDict(
        env_prefix="DB_", case_sensitive=False, extra="ignore"
    )


class StorageSettings(BaseSettings):
    """Device record storage settings."""

    backend: EnumStorageBackend = Field(
        default=EnumStorageBackend.MONGO, description="Device store backend"
    )
    collection: str = Field(
        default="devices", description="Path prefix of the device records"
    )
    mongo_collection: str = Field(
        default="device_records",
        description="MongoDB collection holding the device records",
    )

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_", case_sensitive=False, extra="ignore"
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: EnumLogLevel = Field(default=EnumLogLevel.INFO, description="Logging level")
    file_path: Optional[str] = Field(
        default=None, description="Log file path (if None, logs to console)"
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_", case_sensitive=False, extra="ignore"
    )


class AppSettings(BaseSettings):
    """Main application settings, aggregating all sub-settings."""

    environment: EnumEnvironment = Field(
        default=EnumEnvironment.DEVELOPMENT, description="Application environment"
    )

    service: ServiceSettings = Field(default_factory=ServiceSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


def get_settings() -> AppSettings:
    """
    Get application settings instance Factory.

    Used to be mocked in tests, allowing different settings based on environment.
    """
    return AppSettings()


settings = get_settings()
