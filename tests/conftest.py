"""Shared test fixtures for the Home Assistant flow bridge.

Provides the fake hub, fake host runtime, status capability and a node
builder used across the unit tests.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any
from unittest.mock import MagicMock

import pytest

from ha_flow_bridge.nodes.config import NodeConfig
from ha_flow_bridge.nodes.context import NodeContext, NodeIdentity
from ha_flow_bridge.nodes.status import NodeStatus
from ha_flow_bridge.settings import Settings
from tests.factories import EntityStateFactory, NodeConfigFactory
from tests.mocks import FakeHub, FakeRuntime

FIXED_NOW = datetime(2026, 10, 16, 20, 57)


# =============================================================================
# SETTINGS
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Provide test settings with safe defaults."""
    return Settings(
        environment="testing",
        debug=False,
        log_level="DEBUG",
    )


@pytest.fixture
def mock_settings(test_settings: Settings, monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Mock get_settings() to return test settings."""
    from ha_flow_bridge import logging_config, settings

    monkeypatch.setattr(settings, "get_settings", lambda: test_settings)
    monkeypatch.setattr(logging_config, "get_settings", lambda: test_settings)
    return test_settings


# =============================================================================
# COLLABORATORS
# =============================================================================


@pytest.fixture
def motion_state() -> dict[str, Any]:
    return EntityStateFactory(entity_id="binary_sensor.kitchen_motion", state="on")


@pytest.fixture
def hub(motion_state: dict[str, Any]) -> FakeHub:
    return FakeHub(states={motion_state["entity_id"]: motion_state})


@pytest.fixture
def runtime() -> FakeRuntime:
    return FakeRuntime(outputs=3)


@pytest.fixture
def status_sink() -> MagicMock:
    return MagicMock()


@pytest.fixture
def status(status_sink: MagicMock) -> NodeStatus:
    return NodeStatus(status_sink, clock=lambda: FIXED_NOW)


@pytest.fixture
def make_context(
    hub: FakeHub, runtime: FakeRuntime, status: NodeStatus
) -> Callable[..., NodeContext]:
    """Build a NodeContext around the shared fakes."""

    def _make(
        *,
        node_type: str = "ha-switch",
        exposed: bool = True,
        **config_overrides: Any,
    ) -> NodeContext:
        definition = NodeConfigFactory(exposeToHomeAssistant=exposed, **config_overrides)
        config = NodeConfig.model_validate(definition)
        return NodeContext(
            identity=NodeIdentity(
                node_id=definition["id"],
                node_type=node_type,
                server_id=config.server_id,
            ),
            config=config,
            hub=hub,
            runtime=runtime,
            status=status,
            exposed=exposed,
        )

    return _make
