"""Outbound message schemas for the hub.

Discovery registers (or, with ``remove``, unregisters) a node as an entity.
Entity messages push the node's enabled state after the hub toggled it.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from ha_flow_bridge.const import DEFAULT_COMPONENT, MSG_TYPE_DISCOVERY, MSG_TYPE_ENTITY


class DiscoveryMessage(BaseModel):
    """``nodered/discovery`` payload.

    The removal variant carries ``remove=True`` and neither ``state`` nor
    ``config``; unset fields are dropped when serialised.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["nodered/discovery"] = MSG_TYPE_DISCOVERY
    server_id: str
    node_id: str
    component: str = DEFAULT_COMPONENT
    state: bool | None = None
    config: dict[str, Any] | None = None
    remove: bool | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class EntityStateMessage(BaseModel):
    """``nodered/entity`` payload."""

    model_config = ConfigDict(frozen=True)

    type: Literal["nodered/entity"] = MSG_TYPE_ENTITY
    server_id: str
    node_id: str
    state: bool = Field(..., description="Current enabled flag of the node")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump()


def build_discovery_payload(
    server_id: str,
    node_id: str,
    *,
    state: bool,
    config: dict[str, Any],
    component: str = DEFAULT_COMPONENT,
) -> dict[str, Any]:
    """Payload that registers a node with the hub."""
    return DiscoveryMessage(
        server_id=server_id,
        node_id=node_id,
        component=component,
        state=state,
        config=config,
    ).to_payload()


def build_removal_payload(
    server_id: str,
    node_id: str,
    *,
    component: str = DEFAULT_COMPONENT,
) -> dict[str, Any]:
    """Payload that removes a node's entity from the hub."""
    return DiscoveryMessage(
        server_id=server_id,
        node_id=node_id,
        component=component,
        remove=True,
    ).to_payload()


def build_entity_state_payload(server_id: str, node_id: str, *, state: bool) -> dict[str, Any]:
    """Payload reporting the node's enabled flag back to the hub."""
    return EntityStateMessage(server_id=server_id, node_id=node_id, state=state).to_payload()


__all__ = [
    "DiscoveryMessage",
    "EntityStateMessage",
    "build_discovery_payload",
    "build_entity_state_payload",
    "build_removal_payload",
]
