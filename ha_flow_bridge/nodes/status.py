"""Status indicator shown under a node in the flow editor."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

from ha_flow_bridge.const import DEFAULT_STATUS_DATE_FORMAT, StatusFill, StatusShape

StatusSink = Callable[[dict[str, Any]], None]


class NodeStatus:
    """Status-reporting capability handed to each node.

    Wraps the host's raw status setter and keeps the last value so tests
    and diagnostics can read it back.
    """

    def __init__(
        self,
        sink: StatusSink,
        *,
        date_format: str = DEFAULT_STATUS_DATE_FORMAT,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._sink = sink
        self._date_format = date_format
        self._clock = clock
        self.last: dict[str, Any] | None = None

    def set(
        self,
        *,
        shape: StatusShape = StatusShape.DOT,
        fill: StatusFill = StatusFill.BLUE,
        text: str = "",
    ) -> None:
        status = {"fill": fill.value, "shape": shape.value, "text": text}
        self.last = status
        self._sink(status)

    def set_failed(self, text: str) -> None:
        self.set(shape=StatusShape.RING, fill=StatusFill.RED, text=text)

    def set_success(self, text: str) -> None:
        self.set(shape=StatusShape.DOT, fill=StatusFill.GREEN, text=text)

    def append_date_string(self, text: Any) -> str:
        """``"<text> at: <now>"`` using the configured date format."""
        return f"{text} at: {self._clock().strftime(self._date_format)}"


__all__ = ["NodeStatus", "StatusSink"]
