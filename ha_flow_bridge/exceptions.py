"""Bridge exception hierarchy.

Base exceptions for the node lifecycle layers with correlation ID support.

Usage:
    from ha_flow_bridge.exceptions import HubConnectionError, TriggerValidationError

    try:
        await subscriptions.acquire(handler, payload)
    except HubConnectionError as e:
        logger.error("Registration failed (%s)", e.correlation_id)
"""

import uuid
from typing import Any


class BridgeError(Exception):
    """Base exception for all bridge errors.

    Carries a correlation_id for tracing errors across layers.
    """

    def __init__(self, message: str, *, correlation_id: str | None = None):
        self.correlation_id = correlation_id or str(uuid.uuid4())
        super().__init__(message)


class HubConnectionError(BridgeError):
    """The hub could not be reached while subscribing or registering."""

    def __init__(self, message: str, *, node_id: str | None = None, **kwargs):
        self.node_id = node_id
        super().__init__(message, **kwargs)


class TriggerValidationError(BridgeError):
    """Malformed trigger data received from the hub.

    ``details`` holds the individual validation errors.
    """

    def __init__(
        self,
        message: str,
        details: list[dict[str, Any]] | None = None,
        *,
        correlation_id: str | None = None,
    ):
        self.details = details or []
        super().__init__(message, correlation_id=correlation_id)


class MissingEntityError(BridgeError):
    """A trigger referenced an entity that is not in the hub's state cache."""

    def __init__(self, message: str, *, entity_id: str | None = None, **kwargs):
        self.entity_id = entity_id
        super().__init__(message, **kwargs)


class SubscriptionTeardownError(BridgeError):
    """Unsubscribing from the hub failed.

    Only ever logged. Teardown failures never propagate to the caller.
    """

    pass


class SubscriptionStateError(BridgeError):
    """A subscription was acquired while another one is held or pending."""

    pass
