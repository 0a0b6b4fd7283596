"""Bridge between flow-runtime nodes and Home Assistant.

Nodes can expose themselves to the hub as switch entities, hold a single
subscription for events coming back, and fan automation triggers out to
their outputs.
"""

from ha_flow_bridge.nodes import EventsHaNode
from ha_flow_bridge.plugin import NodeFactory, load_plugin

__version__ = "0.1.0"

__all__ = ["EventsHaNode", "NodeFactory", "load_plugin"]
