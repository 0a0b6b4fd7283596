"""Stored configuration of an HA-aware event node.

Mirrors the node definition saved by the flow editor. Only the fields the
entity lifecycle reads are modelled; everything else is kept as extra.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ServerRef(BaseModel):
    """Reference to the hub connection the node is bound to."""

    model_config = ConfigDict(extra="allow")

    id: str


class HaConfigItem(BaseModel):
    """One ``property = value`` row of the entity config table."""

    model_config = ConfigDict(extra="allow")

    property: str
    value: str | list[Any] = ""


class NodeConfig(BaseModel):
    """Node definition as deployed from the editor."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    server: ServerRef | None = None
    expose_to_home_assistant: bool | None = Field(
        default=None,
        alias="exposeToHomeAssistant",
        description="Publish this node as a switch entity in the hub",
    )
    ha_config: list[HaConfigItem] | None = Field(default=None, alias="haConfig")
    # Sensor-style nodes store the same table under ``config``
    legacy_config: list[HaConfigItem] | None = Field(default=None, alias="config")
    entity_type: str | None = Field(default=None, alias="entityType")
    debug: bool = False

    @property
    def server_id(self) -> str | None:
        return self.server.id if self.server else None

    def discovery_config(self) -> dict[str, Any]:
        """Entity config sent with discovery, skipping rows without a value."""
        items = self.ha_config if self.ha_config is not None else self.legacy_config
        return {item.property: item.value for item in items or [] if len(item.value)}


__all__ = ["HaConfigItem", "NodeConfig", "ServerRef"]
