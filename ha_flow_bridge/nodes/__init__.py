"""HA-aware flow nodes: entity exposure, registration, and event dispatch."""

from ha_flow_bridge.nodes.config import HaConfigItem, NodeConfig, ServerRef
from ha_flow_bridge.nodes.context import (
    HostRuntime,
    InMemoryLastPayloadStore,
    LastPayloadStore,
    NodeContext,
    NodeIdentity,
)
from ha_flow_bridge.nodes.dispatcher import EventDispatcher
from ha_flow_bridge.nodes.events import (
    AutomationTriggeredEvent,
    HubEvent,
    HubEventType,
    StateChangedEvent,
    TriggerData,
    UnrecognizedEvent,
    parse_hub_event,
    validate_trigger_data,
)
from ha_flow_bridge.nodes.events_ha_node import EventsHaNode
from ha_flow_bridge.nodes.exposure import ExposureTracker, compute_removal_needed, should_expose
from ha_flow_bridge.nodes.fanout import (
    TriggerFanout,
    build_port_payload,
    build_trigger_envelope,
    parse_output_paths,
)
from ha_flow_bridge.nodes.registration import (
    RegistrationState,
    RegistrationStateMachine,
    entity_type_filter,
)
from ha_flow_bridge.nodes.status import NodeStatus
from ha_flow_bridge.nodes.subscription import SubscriptionManager

__all__ = [
    "AutomationTriggeredEvent",
    # Node
    "EventDispatcher",
    "EventsHaNode",
    # Exposure
    "ExposureTracker",
    "HaConfigItem",
    "HostRuntime",
    "HubEvent",
    "HubEventType",
    "InMemoryLastPayloadStore",
    "LastPayloadStore",
    "NodeConfig",
    "NodeContext",
    "NodeIdentity",
    "NodeStatus",
    # Registration
    "RegistrationState",
    "RegistrationStateMachine",
    "ServerRef",
    "StateChangedEvent",
    "SubscriptionManager",
    "TriggerData",
    # Fan-out
    "TriggerFanout",
    "UnrecognizedEvent",
    "build_port_payload",
    "build_trigger_envelope",
    "compute_removal_needed",
    "entity_type_filter",
    "parse_hub_event",
    "parse_output_paths",
    "should_expose",
    "validate_trigger_data",
]
