"""Track whether a node is exposed to the hub as an entity.

Every evaluation records the node's current exposure in the connection's
shared registry. The next incarnation of the node compares against that
record to detect an exposed -> un-exposed edit and remove the stale entity.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ha_flow_bridge.nodes.config import NodeConfig
    from ha_flow_bridge.nodes.context import NodeContext

logger = logging.getLogger(__name__)


def should_expose(config: NodeConfig) -> bool:
    """Configured exposure flag, False when unset."""
    return config.expose_to_home_assistant is True


def compute_removal_needed(previous: bool | None, current: bool) -> bool:
    """True only for the exposed -> not exposed transition."""
    return previous is True and current is False


class ExposureTracker:
    """Keeps ``ctx.exposed`` and ``ctx.remove_from_hub`` in step with config."""

    def __init__(self, ctx: NodeContext) -> None:
        self._ctx = ctx

    def evaluate(self) -> bool:
        """Read exposure from config and record it in the shared registry.

        Returns the new exposure value.
        """
        ctx = self._ctx
        current = should_expose(ctx.config)
        ctx.exposed = current

        # Without a server there is no registry to compare against
        if ctx.config.server is None:
            ctx.remove_from_hub = False
            return current

        registry = ctx.hub.exposed_nodes
        ctx.remove_from_hub = compute_removal_needed(registry.was_exposed(ctx.node_id), current)
        registry[ctx.node_id] = current

        if ctx.remove_from_hub:
            logger.debug("Node %s is no longer exposed, removal pending", ctx.node_id)
        return current

    def reconfigure(self, config: NodeConfig) -> bool:
        """Apply a new configuration and re-evaluate exposure."""
        self._ctx.config = config
        return self.evaluate()


__all__ = ["ExposureTracker", "compute_removal_needed", "should_expose"]
