"""Plugin entry point.

The host calls ``load_plugin()`` once when the plugin is loaded and uses
the returned factory to build a node for every deployed node definition.
Settings are resolved here; nodes only ever see plain values.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ha_flow_bridge.logging_config import configure_logging
from ha_flow_bridge.nodes.events_ha_node import EventsHaNode
from ha_flow_bridge.nodes.registration import entity_type_filter
from ha_flow_bridge.nodes.status import NodeStatus
from ha_flow_bridge.settings import Settings, get_settings

if TYPE_CHECKING:
    from ha_flow_bridge.hub.protocol import HubConnection
    from ha_flow_bridge.nodes.config import NodeConfig
    from ha_flow_bridge.nodes.context import HostRuntime
    from ha_flow_bridge.nodes.status import StatusSink

logger = logging.getLogger(__name__)


class NodeFactory:
    """Builds nodes wired with the plugin's settings."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._manages_entity_type = entity_type_filter(settings.removable_entity_types)

    def create(
        self,
        *,
        node_id: str,
        node_type: str,
        config: NodeConfig | Mapping[str, Any],
        hub: HubConnection,
        runtime: HostRuntime,
        status: NodeStatus | StatusSink,
        node_cls: type[EventsHaNode] = EventsHaNode,
        **kwargs: Any,
    ) -> EventsHaNode:
        if not isinstance(status, NodeStatus):
            status = NodeStatus(status, date_format=self.settings.status_date_format)

        kwargs.setdefault("manages_entity_type", self._manages_entity_type)
        kwargs.setdefault("enable_reset_exempt", self.settings.enable_reset_exempt_node_types)
        kwargs.setdefault("component", self.settings.discovery_component)

        logger.debug("Creating %s node %s", node_type, node_id)
        return node_cls(
            node_id=node_id,
            node_type=node_type,
            config=config,
            hub=hub,
            runtime=runtime,
            status=status,
            **kwargs,
        )


def load_plugin(settings: Settings | None = None, *, setup_logging: bool = True) -> NodeFactory:
    """Resolve settings, configure logging, and return the node factory."""
    settings = settings or get_settings()
    if setup_logging:
        configure_logging("DEBUG" if settings.debug else settings.log_level)
    logger.info("Home Assistant flow bridge loaded (%s)", settings.environment)
    return NodeFactory(settings)


__all__ = ["NodeFactory", "load_plugin"]
