"""Fake hub connection and host runtime for testing.

Provides in-memory stand-ins for the collaborators a node talks to,
recording everything sent so tests can assert on it.
"""

import asyncio
from typing import Any

from ha_flow_bridge.hub.registry import ExposedNodesRegistry

# =============================================================================
# HUB CONNECTION
# =============================================================================


class FakeHub:
    """In-memory hub connection.

    ``gate`` (an ``asyncio.Event``) holds ``subscribe_message`` open until
    set, to simulate a subscription still in flight.
    """

    def __init__(
        self,
        *,
        integration_loaded: bool = True,
        states: dict[str, dict[str, Any]] | None = None,
        registry: ExposedNodesRegistry | None = None,
    ) -> None:
        self.is_integration_loaded = integration_loaded
        self.exposed_nodes = registry if registry is not None else ExposedNodesRegistry()
        self.states = states or {}
        self.sent: list[dict[str, Any]] = []
        self.subscribe_calls: list[dict[str, Any]] = []
        self.handlers: list[Any] = []
        self.unsubscribe_calls = 0
        self.subscribe_error: Exception | None = None
        self.unsubscribe_error: Exception | None = None
        self.gate: asyncio.Event | None = None

    async def subscribe_message(self, handler, payload, *, resubscribe=True):
        self.subscribe_calls.append({"payload": payload, "resubscribe": resubscribe})
        if self.gate is not None:
            await self.gate.wait()
        if self.subscribe_error is not None:
            raise self.subscribe_error
        self.handlers.append(handler)

        async def unsubscribe() -> None:
            self.unsubscribe_calls += 1
            if self.unsubscribe_error is not None:
                raise self.unsubscribe_error

        return unsubscribe

    def send(self, message: dict[str, Any]) -> None:
        self.sent.append(message)

    def get_cached_state(self, entity_id: str) -> dict[str, Any] | None:
        return self.states.get(entity_id)

    @property
    def removals(self) -> list[dict[str, Any]]:
        return [m for m in self.sent if m.get("remove") is True]

    @property
    def entity_updates(self) -> list[dict[str, Any]]:
        return [m for m in self.sent if m.get("type") == "nodered/entity"]


# =============================================================================
# HOST RUNTIME
# =============================================================================


class FakeRuntime:
    """Records what a node sends and logs through the host runtime."""

    def __init__(self, outputs: int = 1) -> None:
        self.wires: list[list[str]] = [[f"wire-{i}"] for i in range(outputs)]
        self.sent: list[Any] = []
        self.debug_messages: list[str] = []
        self.error_messages: list[str] = []

    def send(self, payload: Any) -> None:
        self.sent.append(payload)

    def debug(self, message: str) -> None:
        self.debug_messages.append(message)

    def error(self, message: str) -> None:
        self.error_messages.append(message)
