"""Turn one automation trigger into output messages.

With ``skip_condition`` unset the trigger is handed to the node's own
trigger handler. Otherwise the message is sent straight to the outputs
selected by ``output_path``:

- ``"1"`` alone sends the bare message (the single-output case),
- any ``0`` sends ``[msg]`` on every output,
- other indices send ``msg`` on those outputs and ``None`` on the rest.

Indices beyond the node's output count are dropped.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any

from ha_flow_bridge.const import STATUS_TEXT_ERROR, StatusShape
from ha_flow_bridge.exceptions import MissingEntityError, TriggerValidationError
from ha_flow_bridge.nodes.events import validate_trigger_data

if TYPE_CHECKING:
    from ha_flow_bridge.nodes.context import NodeContext

logger = logging.getLogger(__name__)

BROADCAST_PATH = 0

EntityIdResolver = Callable[[], str | None]
TriggerHandler = Callable[[dict[str, Any]], Awaitable[None] | None]


def parse_output_paths(output_path: str, output_count: int) -> list[int]:
    """Parse ``"1,3"`` style paths, keeping indices within ``0..output_count``.

    A blank entry counts as 0. Non-numeric entries are ignored. Order and
    duplicates are kept.
    """
    paths: list[int] = []
    for part in output_path.split(","):
        token = part.strip()
        try:
            index = int(token) if token else BROADCAST_PATH
        except ValueError:
            continue
        if 0 <= index <= output_count:
            paths.append(index)
    return paths


def build_port_payload(paths: list[int], output_count: int, message: dict[str, Any]) -> Any:
    """Per-output payload for the host's send primitive."""
    if paths == [1]:
        return message
    if BROADCAST_PATH in paths:
        return [[message] for _ in range(output_count)]
    return [message if port in paths else None for port in range(1, output_count + 1)]


def build_trigger_envelope(entity: Mapping[str, Any]) -> dict[str, Any]:
    """Event envelope for a manual trigger; old and new state are the same entity."""
    entity_id = entity.get("entity_id")
    return {
        "event_type": "triggered",
        "entity_id": entity_id,
        "event": {
            "entity_id": entity_id,
            "old_state": entity,
            "new_state": entity,
        },
    }


def _no_entity_id() -> str | None:
    return None


def _ignore_trigger(envelope: dict[str, Any]) -> None:
    return None


class TriggerFanout:
    """Handles ``automation_triggered`` data for one node."""

    def __init__(
        self,
        ctx: NodeContext,
        *,
        get_node_entity_id: EntityIdResolver = _no_entity_id,
        trigger_node: TriggerHandler = _ignore_trigger,
    ) -> None:
        self._ctx = ctx
        self._get_node_entity_id = get_node_entity_id
        self._trigger_node = trigger_node

    async def handle_trigger(self, data: Any = None) -> None:
        ctx = self._ctx
        if not ctx.enabled:
            return

        try:
            trigger = validate_trigger_data(data)
            entity_id = trigger.entity_id or self._get_node_entity_id()
            if not entity_id:
                raise TriggerValidationError(
                    "Entity filter type is not set to exact and no entity_id found in trigger data."
                )

            entity = ctx.hub.get_cached_state(entity_id)
            if not entity:
                raise MissingEntityError(
                    f"entity_id provided by trigger event not found in cache: {entity_id}",
                    entity_id=entity_id,
                )
        except (TriggerValidationError, MissingEntityError) as exc:
            ctx.status.set_failed(STATUS_TEXT_ERROR)
            ctx.runtime.error(f"Trigger Error: {exc}")
            logger.warning("Trigger dropped for node %s: %s", ctx.node_id, exc)
            return

        envelope = build_trigger_envelope(entity)

        if not trigger.skip_condition:
            result = self._trigger_node(envelope)
            if inspect.isawaitable(result):
                await result
            return

        output_count = ctx.output_count
        if output_count == 0:
            return

        paths = parse_output_paths(trigger.output_path, output_count)
        if not paths:
            return

        new_state = envelope["event"]["new_state"].get("state")
        message = {
            "topic": entity_id,
            "payload": new_state,
            "data": envelope["event"],
        }
        payload = build_port_payload(paths, output_count, message)

        ctx.status.set(
            shape=StatusShape.DOT if 1 in paths else StatusShape.RING,
            text=ctx.status.append_date_string(new_state),
        )
        ctx.runtime.send(payload)


__all__ = [
    "TriggerFanout",
    "build_port_payload",
    "build_trigger_envelope",
    "parse_output_paths",
]
