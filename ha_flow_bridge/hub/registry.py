"""Connection-scoped record of node exposure.

Nodes are recreated, not mutated, on every deploy. The registry outlives
them on the hub connection, so a freshly built node can tell that its
previous incarnation was exposed and now needs removing from the hub.

Writes are plain key assignment, last writer wins. All access happens on
the event loop between await points, so no locking is needed.
"""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping


class ExposedNodesRegistry(MutableMapping[str, bool]):
    """Mapping of node id to the exposure flag it was last deployed with."""

    def __init__(self, initial: dict[str, bool] | None = None) -> None:
        self._nodes: dict[str, bool] = dict(initial or {})

    def __getitem__(self, node_id: str) -> bool:
        return self._nodes[node_id]

    def __setitem__(self, node_id: str, exposed: bool) -> None:
        self._nodes[node_id] = bool(exposed)

    def __delitem__(self, node_id: str) -> None:
        del self._nodes[node_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def was_exposed(self, node_id: str) -> bool:
        """Last recorded exposure for ``node_id``; False if never recorded."""
        return self._nodes.get(node_id) is True

    def __repr__(self) -> str:
        return f"ExposedNodesRegistry({self._nodes!r})"


__all__ = ["ExposedNodesRegistry"]
