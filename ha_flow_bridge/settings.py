"""Plugin settings using pydantic-settings.

Loads configuration from environment variables with .env file support.
"""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ha_flow_bridge.const import (
    DEFAULT_COMPONENT,
    DEFAULT_STATUS_DATE_FORMAT,
    NODE_TYPE_TRIGGER_STATE,
)


class Settings(BaseSettings):
    """Plugin configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,  # Allow both field name and alias
    )

    # Environment
    environment: Literal["development", "testing", "production"] = "development"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Level for the ha_flow_bridge loggers",
    )

    # Entity lifecycle
    removable_entity_types: list[str] = Field(
        default_factory=lambda: [DEFAULT_COMPONENT],
        description="Entity types whose nodes remove themselves from the hub when un-exposed",
        validation_alias=AliasChoices("removable_entity_types", "ha_removable_entity_types"),
    )
    enable_reset_exempt_node_types: list[str] = Field(
        default_factory=lambda: [NODE_TYPE_TRIGGER_STATE],
        description="Node types that manage their own enabled state after deregistration",
    )
    discovery_component: str = Field(
        default=DEFAULT_COMPONENT,
        description="Component announced in discovery payloads",
    )

    # Status
    status_date_format: str = Field(
        default=DEFAULT_STATUS_DATE_FORMAT,
        description="strftime pattern appended to node status text",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance (cached after first call)
    """
    return Settings()
