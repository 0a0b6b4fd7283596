"""Register and deregister a node's entity with the hub.

States::

    UNREGISTERED --register()--> REGISTERING --subscribed--> REGISTERED
    REGISTERING  --subscribe failed / released meanwhile--> UNREGISTERED
    REGISTERING  --released, then register() again--> REGISTERING (retried once settled)
    REGISTERED   --integration unloaded--> UNREGISTERED
    REGISTERED   --deregister()--> DEREGISTERING --> UNREGISTERED

Deregistration only sends a removal when the integration is loaded, the
node was un-exposed (or is being deleted), and its entity type is one this
path manages. Once a removal went out, further attempts are no-ops until
the node registers again.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from enum import Enum
from typing import TYPE_CHECKING

from ha_flow_bridge.const import (
    DEFAULT_COMPONENT,
    NODE_TYPE_TRIGGER_STATE,
    STATUS_TEXT_ERROR,
    STATUS_TEXT_REGISTERED,
)
from ha_flow_bridge.exceptions import HubConnectionError
from ha_flow_bridge.hub.messages import build_discovery_payload, build_removal_payload

if TYPE_CHECKING:
    from ha_flow_bridge.nodes.context import NodeContext
    from ha_flow_bridge.nodes.dispatcher import EventDispatcher
    from ha_flow_bridge.nodes.subscription import SubscriptionManager

logger = logging.getLogger(__name__)

EntityTypePredicate = Callable[[str], bool]


class RegistrationState(str, Enum):
    """Where a node stands with the hub."""

    UNREGISTERED = "unregistered"
    REGISTERING = "registering"
    REGISTERED = "registered"
    DEREGISTERING = "deregistering"


def entity_type_filter(entity_types: Iterable[str]) -> EntityTypePredicate:
    """Predicate matching the entity types a deregistration path manages."""
    managed = frozenset(entity_types)

    def _matches(entity_type: str) -> bool:
        return entity_type in managed

    return _matches


class RegistrationStateMachine:
    """Drives one node's entity registration against the hub."""

    def __init__(
        self,
        ctx: NodeContext,
        subscriptions: SubscriptionManager,
        dispatcher: EventDispatcher,
        *,
        manages_entity_type: EntityTypePredicate | None = None,
        enable_reset_exempt: Iterable[str] = (NODE_TYPE_TRIGGER_STATE,),
        component: str = DEFAULT_COMPONENT,
    ) -> None:
        self._ctx = ctx
        self._subscriptions = subscriptions
        self._dispatcher = dispatcher
        self._manages_entity_type = manages_entity_type or entity_type_filter([component])
        self._enable_reset_exempt = frozenset(enable_reset_exempt)
        self._component = component
        self._state = RegistrationState.UNREGISTERED
        self._removal_sent = False
        self._closed = False
        self._retry_after_pending = False

    @property
    def state(self) -> RegistrationState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    async def register(self, *, show_status: bool = True) -> bool:
        """Subscribe as an entity if the integration is ready and the node exposed.

        Returns True when the node ended up registered by this call.
        """
        ctx = self._ctx
        if self._closed:
            return False
        if self._subscriptions.is_pending:
            # The in-flight subscribe settles first, then the guards are re-checked
            self._retry_after_pending = True
            return False
        if self._state in (RegistrationState.REGISTERING, RegistrationState.REGISTERED):
            return False
        if not ctx.integration_loaded or not ctx.exposed or ctx.server_id is None:
            return False

        self._state = RegistrationState.REGISTERING
        payload = build_discovery_payload(
            ctx.server_id,
            ctx.node_id,
            state=ctx.enabled,
            config=ctx.config.discovery_config(),
            component=self._component,
        )

        ctx.runtime.debug("Registering with Home Assistant")
        try:
            handle = await self._subscriptions.acquire(
                self._dispatcher.dispatch,
                payload,
                resubscribe=False,
            )
        except HubConnectionError as exc:
            self._state = RegistrationState.UNREGISTERED
            self._retry_after_pending = False
            ctx.status.set_failed(STATUS_TEXT_ERROR)
            ctx.runtime.error(str(exc))
            logger.error("Registration failed for node %s: %s", ctx.node_id, exc)
            return False

        retry, self._retry_after_pending = self._retry_after_pending, False
        if handle is None:
            # Released while subscribing, the late handle is already gone
            self._state = RegistrationState.UNREGISTERED
            if retry:
                logger.debug("Node %s retrying registration after release", ctx.node_id)
                return await self.register(show_status=show_status)
            return False

        self._state = RegistrationState.REGISTERED
        self._removal_sent = False
        if show_status:
            ctx.status.set_success(STATUS_TEXT_REGISTERED)
        logger.debug("Node %s registered with the hub", ctx.node_id)
        return True

    async def deregister(self, *, node_removed: bool = False) -> bool:
        """Remove the node's entity from the hub when the guards allow it.

        Returns True when a removal message was sent.
        """
        ctx = self._ctx
        if not ctx.integration_loaded or ctx.server_id is None:
            return False
        if self._removal_sent or not (ctx.remove_from_hub or node_removed):
            return False
        entity_type = ctx.config.entity_type
        if entity_type and not self._manages_entity_type(entity_type):
            return False

        self._state = RegistrationState.DEREGISTERING
        ctx.hub.send(build_removal_payload(ctx.server_id, ctx.node_id, component=self._component))
        ctx.remove_from_hub = False
        self._removal_sent = True
        logger.debug("Removal sent for node %s", ctx.node_id)

        await self._subscriptions.release()
        self._reset_enabled()
        self._settle_unregistered()
        return True

    async def integration_ready(self) -> None:
        """Integration came up: register, then clear out a stale exposed entity."""
        await self.register()
        await self.deregister()

    async def integration_unavailable(self) -> None:
        """Integration went away: drop the subscription and fall back to enabled."""
        await self._subscriptions.release()
        self._reset_enabled()
        self._settle_unregistered()

    def connection_reopened(self) -> None:
        """The hub connection was replaced; its subscriptions died with it."""
        self._subscriptions.discard()
        self._settle_unregistered()

    async def close(self, *, removed: bool = False) -> None:
        """Node is going away. No registration starts after this."""
        self._closed = True
        if removed and self._ctx.exposed:
            await self.deregister(node_removed=True)
        await self._subscriptions.release()
        self._settle_unregistered()

    def _settle_unregistered(self) -> None:
        # An in-flight subscribe still owns the state until it returns
        if self._subscriptions.is_pending:
            self._state = RegistrationState.REGISTERING
        else:
            self._state = RegistrationState.UNREGISTERED

    def _reset_enabled(self) -> None:
        # Nothing can toggle the node once it is gone from the hub
        if self._ctx.identity.node_type not in self._enable_reset_exempt:
            self._ctx.enabled = True


__all__ = [
    "EntityTypePredicate",
    "RegistrationState",
    "RegistrationStateMachine",
    "entity_type_filter",
]
