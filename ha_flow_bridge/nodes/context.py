"""Per-node state shared by the lifecycle components.

Each node owns exactly one ``NodeContext``. The exposure tracker,
subscription manager, registration machine, dispatcher and fan-out engine
all receive it instead of reaching into each other.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ha_flow_bridge.hub.protocol import HubConnection
    from ha_flow_bridge.nodes.config import NodeConfig
    from ha_flow_bridge.nodes.status import NodeStatus


@dataclass(frozen=True)
class NodeIdentity:
    """Who the node is. Fixed at construction."""

    node_id: str
    node_type: str
    server_id: str | None = None


class HostRuntime(Protocol):
    """The flow runtime's side of a node."""

    @property
    def wires(self) -> list[list[str]]:
        """Connected wires, one list per output port."""
        ...

    def send(self, payload: Any) -> None: ...

    def debug(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LastPayloadStore(Protocol):
    def get_last_payload(self) -> Any: ...

    def set_last_payload(self, payload: Any) -> None: ...


class InMemoryLastPayloadStore:
    """Default store, lost when the node is recreated."""

    def __init__(self) -> None:
        self._payload: Any = None

    def get_last_payload(self) -> Any:
        return self._payload

    def set_last_payload(self, payload: Any) -> None:
        self._payload = payload


@dataclass
class NodeContext:
    """Mutable per-node state plus the injected capabilities.

    ``enabled`` mirrors the entity state reported by the hub and gates
    triggers. ``remove_from_hub`` is set when the node was exposed on its
    previous deploy and no longer is; it is cleared by the first removal.
    """

    identity: NodeIdentity
    config: NodeConfig
    hub: HubConnection
    runtime: HostRuntime
    status: NodeStatus
    payload_store: LastPayloadStore = field(default_factory=InMemoryLastPayloadStore)
    enabled: bool = True
    exposed: bool = False
    remove_from_hub: bool = False

    @property
    def node_id(self) -> str:
        return self.identity.node_id

    @property
    def server_id(self) -> str | None:
        return self.identity.server_id

    @property
    def integration_loaded(self) -> bool:
        return bool(self.hub.is_integration_loaded)

    @property
    def output_count(self) -> int:
        """Number of output ports, taken from the node's wiring."""
        wires = getattr(self.runtime, "wires", None)
        if isinstance(wires, list):
            return len(wires)
        return 0


__all__ = [
    "HostRuntime",
    "InMemoryLastPayloadStore",
    "LastPayloadStore",
    "NodeContext",
    "NodeIdentity",
]
