"""Event node that can expose itself to Home Assistant as a switch entity.

The node composes the lifecycle pieces around one ``NodeContext``:

- ``ExposureTracker`` works out whether the node is exposed and whether a
  previous deploy left an entity behind that must be removed,
- ``RegistrationStateMachine`` registers/deregisters with the hub,
- ``SubscriptionManager`` holds the single hub subscription,
- ``EventDispatcher`` and ``TriggerFanout`` handle what comes back.

Registration is started on construction but not awaited; ``ready`` holds
the scheduled task.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from ha_flow_bridge.const import (
    DEFAULT_COMPONENT,
    INTEGRATION_UNAVAILABLE,
    NODE_TYPE_TRIGGER_STATE,
    IntegrationState,
)
from ha_flow_bridge.nodes.config import NodeConfig
from ha_flow_bridge.nodes.context import InMemoryLastPayloadStore, NodeContext, NodeIdentity
from ha_flow_bridge.nodes.dispatcher import EventDispatcher
from ha_flow_bridge.nodes.exposure import ExposureTracker
from ha_flow_bridge.nodes.fanout import TriggerFanout
from ha_flow_bridge.nodes.registration import (
    EntityTypePredicate,
    RegistrationState,
    RegistrationStateMachine,
)
from ha_flow_bridge.nodes.status import NodeStatus
from ha_flow_bridge.nodes.subscription import SubscriptionManager

if TYPE_CHECKING:
    from ha_flow_bridge.hub.protocol import HubConnection
    from ha_flow_bridge.nodes.context import HostRuntime, LastPayloadStore
    from ha_flow_bridge.nodes.status import StatusSink

logger = logging.getLogger(__name__)


class EventsHaNode:
    """HA-aware event node.

    Subclasses (or callers, via the constructor) supply the node's default
    entity id for triggers and the handler that runs a trigger through the
    node's own conditions.
    """

    def __init__(
        self,
        *,
        node_id: str,
        node_type: str,
        config: NodeConfig | Mapping[str, Any],
        hub: HubConnection,
        runtime: HostRuntime,
        status: NodeStatus | StatusSink,
        payload_store: LastPayloadStore | None = None,
        get_node_entity_id: Callable[[], str | None] | None = None,
        trigger_node: Callable[[dict[str, Any]], Awaitable[None] | None] | None = None,
        manages_entity_type: EntityTypePredicate | None = None,
        enable_reset_exempt: Iterable[str] = (NODE_TYPE_TRIGGER_STATE,),
        component: str = DEFAULT_COMPONENT,
        autostart: bool = True,
    ) -> None:
        if not isinstance(config, NodeConfig):
            config = NodeConfig.model_validate(dict(config))
        if not isinstance(status, NodeStatus):
            status = NodeStatus(status)

        self.ctx = NodeContext(
            identity=NodeIdentity(node_id=node_id, node_type=node_type, server_id=config.server_id),
            config=config,
            hub=hub,
            runtime=runtime,
            status=status,
            payload_store=payload_store or InMemoryLastPayloadStore(),
        )

        self.exposure = ExposureTracker(self.ctx)
        self.exposure.evaluate()

        self.subscriptions = SubscriptionManager(hub, node_id=node_id, debug=runtime.debug)
        self.fanout = TriggerFanout(
            self.ctx,
            get_node_entity_id=get_node_entity_id or self.get_node_entity_id,
            trigger_node=trigger_node or self.trigger_node,
        )
        self.dispatcher = EventDispatcher(self.ctx, self.fanout)
        self.registration = RegistrationStateMachine(
            self.ctx,
            self.subscriptions,
            self.dispatcher,
            manages_entity_type=manages_entity_type,
            enable_reset_exempt=enable_reset_exempt,
            component=component,
        )

        self.ready: asyncio.Task[None] | None = None
        if autostart:
            self.ready = self._start()

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def node_id(self) -> str:
        return self.ctx.node_id

    @property
    def is_enabled(self) -> bool:
        return self.ctx.enabled

    @is_enabled.setter
    def is_enabled(self, value: bool) -> None:
        self.ctx.enabled = bool(value)

    @property
    def exposed_to_hub(self) -> bool:
        return self.ctx.exposed

    @property
    def registration_state(self) -> RegistrationState:
        return self.registration.state

    @property
    def last_payload(self) -> Any:
        return self.ctx.payload_store.get_last_payload()

    @last_payload.setter
    def last_payload(self, payload: Any) -> None:
        self.ctx.payload_store.set_last_payload(payload)

    # ------------------------------------------------------------------
    # Lifecycle hooks called by the host runtime
    # ------------------------------------------------------------------

    async def init(self) -> None:
        if self.ctx.integration_loaded:
            await self.registration.integration_ready()

    async def on_open(self) -> None:
        """Hub connection (re)opened."""
        self.registration.connection_reopened()

    async def on_close(self, removed: bool = False) -> None:
        await self.registration.close(removed=removed)

    async def on_integration_state_change(self, state: IntegrationState | str) -> None:
        try:
            state = IntegrationState(state)
        except ValueError:
            logger.debug("Ignoring integration state %r for node %s", state, self.node_id)
            return
        if state is IntegrationState.LOADED:
            await self.registration.integration_ready()
        elif state in INTEGRATION_UNAVAILABLE:
            await self.registration.integration_unavailable()

    async def reconfigure(self, config: NodeConfig | Mapping[str, Any]) -> None:
        """Apply an edited configuration without recreating the node."""
        if not isinstance(config, NodeConfig):
            config = NodeConfig.model_validate(dict(config))
        self.exposure.reconfigure(config)
        if self.ctx.integration_loaded:
            await self.registration.integration_ready()

    async def handle_hub_event(self, event: Mapping[str, Any]) -> None:
        await self.dispatcher.dispatch(event)

    # ------------------------------------------------------------------
    # Overridable node behaviour
    # ------------------------------------------------------------------

    def get_node_entity_id(self) -> str | None:
        return None

    def trigger_node(self, envelope: dict[str, Any]) -> Awaitable[None] | None:
        return None

    # ------------------------------------------------------------------

    def _start(self) -> asyncio.Task[None] | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop yet: the host awaits init() itself
            logger.debug("No running loop, deferring registration of node %s", self.node_id)
            return None
        return loop.create_task(self.init())


__all__ = ["EventsHaNode"]
