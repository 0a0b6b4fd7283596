"""Hub-facing contracts, shared registry, and outbound message schemas."""

from ha_flow_bridge.hub.messages import (
    DiscoveryMessage,
    EntityStateMessage,
    build_discovery_payload,
    build_entity_state_payload,
    build_removal_payload,
)
from ha_flow_bridge.hub.protocol import HubConnection, MessageHandler, UnsubscribeHandle
from ha_flow_bridge.hub.registry import ExposedNodesRegistry

__all__ = [
    "DiscoveryMessage",
    "EntityStateMessage",
    "ExposedNodesRegistry",
    "HubConnection",
    "MessageHandler",
    "UnsubscribeHandle",
    "build_discovery_payload",
    "build_entity_state_payload",
    "build_removal_payload",
]
