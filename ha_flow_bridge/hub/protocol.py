"""Contracts for the hub connection a node is bound to.

The connection itself (websocket transport, authentication, reconnection)
lives in the host plugin. Nodes only depend on the narrow surface below.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ha_flow_bridge.hub.registry import ExposedNodesRegistry

# Async callable returned by subscribe_message; calling it ends the subscription.
UnsubscribeHandle = Callable[[], Awaitable[None]]

MessageHandler = Callable[[dict[str, Any]], Awaitable[None]]


class HubConnection(Protocol):
    """What a node needs from the connection to the hub."""

    @property
    def is_integration_loaded(self) -> bool:
        """Whether the hub-side integration is currently loaded."""
        ...

    @property
    def exposed_nodes(self) -> ExposedNodesRegistry:
        """Connection-scoped record of which nodes were last exposed."""
        ...

    async def subscribe_message(
        self,
        handler: MessageHandler,
        payload: dict[str, Any],
        *,
        resubscribe: bool = True,
    ) -> UnsubscribeHandle:
        """Send ``payload`` and route every reply to ``handler``.

        Raises on connection errors.
        """
        ...

    def send(self, message: dict[str, Any]) -> None:
        """Fire-and-forget a message to the hub."""
        ...

    def get_cached_state(self, entity_id: str) -> dict[str, Any] | None:
        """Look up an entity in the connection's local state cache."""
        ...


__all__ = ["HubConnection", "MessageHandler", "UnsubscribeHandle"]
