"""Constants shared by the hub and node layers."""

from __future__ import annotations

from enum import Enum

# =============================================================================
# HUB MESSAGE TYPES
# =============================================================================

MSG_TYPE_DISCOVERY = "nodered/discovery"
MSG_TYPE_ENTITY = "nodered/entity"

DEFAULT_COMPONENT = "switch"

# =============================================================================
# INTEGRATION STATE
# =============================================================================


class IntegrationState(str, Enum):
    """Integration state transitions reported by the hub connection."""

    LOADED = "loaded"
    UNLOADED = "unloaded"
    NOT_LOADED = "notloaded"


INTEGRATION_UNAVAILABLE = frozenset({IntegrationState.UNLOADED, IntegrationState.NOT_LOADED})

# =============================================================================
# NODE TYPES
# =============================================================================

NODE_TYPE_TRIGGER_STATE = "trigger-state"

# =============================================================================
# STATUS
# =============================================================================


class StatusShape(str, Enum):
    """Shape of the status indicator shown under a node."""

    DOT = "dot"
    RING = "ring"


class StatusFill(str, Enum):
    """Colour of the status indicator."""

    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    GREY = "grey"


STATUS_TEXT_ERROR = "Error"
STATUS_TEXT_REGISTERED = "Registered"

DEFAULT_STATUS_DATE_FORMAT = "%b %d, %H:%M"
