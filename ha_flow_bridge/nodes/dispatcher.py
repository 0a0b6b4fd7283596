"""Route events from a node's hub subscription.

``state_changed`` updates the node's enabled flag and echoes it back to the
hub. ``automation_triggered`` goes to the fan-out engine. Everything else
is ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from ha_flow_bridge.hub.messages import build_entity_state_payload
from ha_flow_bridge.nodes.events import (
    AutomationTriggeredEvent,
    StateChangedEvent,
    UnrecognizedEvent,
    parse_hub_event,
)

if TYPE_CHECKING:
    from ha_flow_bridge.nodes.context import NodeContext
    from ha_flow_bridge.nodes.fanout import TriggerFanout

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Message handler passed to the hub when the node subscribes."""

    def __init__(self, ctx: NodeContext, fanout: TriggerFanout) -> None:
        self._ctx = ctx
        self._fanout = fanout

    async def dispatch(self, raw: Mapping[str, Any]) -> None:
        try:
            event = parse_hub_event(raw)
        except PydanticValidationError as exc:
            logger.warning(
                "Dropping malformed %s event for node %s: %s",
                raw.get("type", "state_changed"),
                self._ctx.node_id,
                exc.errors(include_url=False),
            )
            return

        if isinstance(event, StateChangedEvent):
            self._ctx.enabled = event.state
            self.update_hub()
        elif isinstance(event, AutomationTriggeredEvent):
            await self._fanout.handle_trigger(event.data)
        elif isinstance(event, UnrecognizedEvent):
            logger.debug("Ignoring %s event for node %s", event.type, self._ctx.node_id)

    def update_hub(self) -> None:
        """Report the enabled flag to the hub, if the integration is up."""
        ctx = self._ctx
        if not ctx.integration_loaded or ctx.server_id is None:
            return
        ctx.hub.send(build_entity_state_payload(ctx.server_id, ctx.node_id, state=ctx.enabled))


__all__ = ["EventDispatcher"]
