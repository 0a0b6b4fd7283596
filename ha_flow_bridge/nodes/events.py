"""Typed inbound events delivered through a node's hub subscription.

The hub sends plain dicts discriminated by ``type``. ``parse_hub_event``
turns them into a closed set of models; anything it does not know becomes
an ``UnrecognizedEvent`` so newer hub versions never break older nodes.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ha_flow_bridge.exceptions import TriggerValidationError

# =============================================================================
# EVENT TYPES
# =============================================================================


class HubEventType(str, Enum):
    """Event types the node reacts to."""

    STATE_CHANGED = "state_changed"
    AUTOMATION_TRIGGERED = "automation_triggered"


class StateChangedEvent(BaseModel):
    """The entity was switched on or off from the hub."""

    model_config = ConfigDict(extra="allow")

    type: Literal["state_changed"] = "state_changed"
    state: bool


class AutomationTriggeredEvent(BaseModel):
    """An automation fired the node's trigger service."""

    model_config = ConfigDict(extra="allow")

    type: Literal["automation_triggered"] = "automation_triggered"
    # Validated against TriggerData by the fan-out
    data: Any = Field(default_factory=dict)


class UnrecognizedEvent(BaseModel):
    """Any event type this version does not handle."""

    type: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict)


HubEvent = StateChangedEvent | AutomationTriggeredEvent | UnrecognizedEvent


def parse_hub_event(raw: Mapping[str, Any]) -> HubEvent:
    """Classify a raw hub event.

    Events without a ``type`` key come from hub versions that only ever
    sent state changes and are treated as ``state_changed``.

    Raises:
        pydantic.ValidationError: A known event type with malformed fields.
    """
    payload = dict(raw)
    if "type" not in payload:
        payload["type"] = HubEventType.STATE_CHANGED.value

    event_type = payload["type"]
    if event_type == HubEventType.STATE_CHANGED.value:
        return StateChangedEvent.model_validate(payload)
    if event_type == HubEventType.AUTOMATION_TRIGGERED.value:
        if payload.get("data") is None:
            payload["data"] = {}
        return AutomationTriggeredEvent.model_validate(payload)
    return UnrecognizedEvent(type=event_type if isinstance(event_type, str) else None, raw=payload)


# =============================================================================
# TRIGGER DATA
# =============================================================================


class TriggerData(BaseModel):
    """Payload of an ``automation_triggered`` event."""

    model_config = ConfigDict(extra="forbid")

    entity_id: str | None = Field(
        default=None,
        min_length=1,
        description="Entity to report; falls back to the node's own entity",
    )
    skip_condition: bool = Field(
        default=False,
        description="Send straight to outputs instead of running the node's conditions",
    )
    output_path: str = Field(
        default="0",
        min_length=1,
        description="Comma separated 1-based output indices, 0 for all outputs",
    )


def validate_trigger_data(data: Any) -> TriggerData:
    """Validate trigger data, raising ``TriggerValidationError`` on bad input."""
    if data is None:
        data = {}
    try:
        return TriggerData.model_validate(dict(data) if isinstance(data, Mapping) else data)
    except PydanticValidationError as exc:
        details = [
            {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
            for err in exc.errors()
        ]
        summary = "; ".join(
            f"{'.'.join(str(p) for p in d['loc']) or 'data'}: {d['msg']}" for d in details
        )
        raise TriggerValidationError(summary, details=details) from exc


__all__ = [
    "AutomationTriggeredEvent",
    "HubEvent",
    "HubEventType",
    "StateChangedEvent",
    "TriggerData",
    "UnrecognizedEvent",
    "parse_hub_event",
    "validate_trigger_data",
]
