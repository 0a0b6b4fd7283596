"""Tests for trigger fan-out.

Covers output path parsing, the per-output payload shapes, delegation to
the node's trigger handler, and trigger errors.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from ha_flow_bridge.nodes.fanout import (
    TriggerFanout,
    build_port_payload,
    build_trigger_envelope,
    parse_output_paths,
)

ENTITY_ID = "binary_sensor.kitchen_motion"


class TestParseOutputPaths:
    """Tests for parse_output_paths()."""

    @pytest.mark.parametrize(
        ("output_path", "expected"),
        [
            ("1", [1]),
            ("0", [0]),
            ("2,5", [2]),
            ("9", []),
            (" 1 , 3 ", [1, 3]),
            ("1,,x,-2", [1, 0]),
            ("1,", [1, 0]),
        ],
    )
    def test_parse(self, output_path, expected):
        assert parse_output_paths(output_path, 3) == expected


class TestBuildPortPayload:
    """Tests for build_port_payload()."""

    def test_single_first_output_sends_bare_message(self):
        msg = {"payload": "on"}
        assert build_port_payload([1], 3, msg) is msg

    def test_zero_broadcasts_to_every_output(self):
        msg = {"payload": "on"}
        assert build_port_payload([0], 3, msg) == [[msg], [msg], [msg]]

    def test_zero_wins_over_other_indices(self):
        msg = {"payload": "on"}
        assert build_port_payload([2, 0], 2, msg) == [[msg], [msg]]

    def test_selected_outputs_only(self):
        msg = {"payload": "on"}
        assert build_port_payload([2], 3, msg) == [None, msg, None]

    def test_first_output_among_others_is_positional(self):
        msg = {"payload": "on"}
        assert build_port_payload([1, 3], 3, msg) == [msg, None, msg]


def test_envelope_uses_entity_as_old_and_new_state(motion_state):
    envelope = build_trigger_envelope(motion_state)

    assert envelope["event_type"] == "triggered"
    assert envelope["entity_id"] == ENTITY_ID
    assert envelope["event"]["old_state"] is motion_state
    assert envelope["event"]["new_state"] is motion_state


class TestTriggerFanout:
    """Tests for TriggerFanout.handle_trigger()."""

    @pytest.mark.asyncio
    async def test_first_output_sends_bare_message(self, make_context, runtime, motion_state):
        fanout = TriggerFanout(make_context())

        await fanout.handle_trigger(
            {"entity_id": ENTITY_ID, "skip_condition": True, "output_path": "1"}
        )

        assert runtime.sent == [
            {
                "topic": ENTITY_ID,
                "payload": "on",
                "data": build_trigger_envelope(motion_state)["event"],
            }
        ]

    @pytest.mark.asyncio
    async def test_zero_broadcasts(self, make_context, runtime):
        await TriggerFanout(make_context()).handle_trigger(
            {"entity_id": ENTITY_ID, "skip_condition": True, "output_path": "0"}
        )

        payload = runtime.sent[0]
        assert len(payload) == 3
        assert all(isinstance(port, list) and len(port) == 1 for port in payload)
        assert payload[0][0]["topic"] == ENTITY_ID

    @pytest.mark.asyncio
    async def test_trailing_comma_broadcasts(self, make_context, runtime):
        """A blank entry selects every output, so "1," is not the bare-message case."""
        await TriggerFanout(make_context()).handle_trigger(
            {"entity_id": ENTITY_ID, "skip_condition": True, "output_path": "1,"}
        )

        payload = runtime.sent[0]
        assert len(payload) == 3
        assert all(port[0]["topic"] == ENTITY_ID for port in payload)

    @pytest.mark.asyncio
    async def test_out_of_range_index_dropped(self, make_context, runtime):
        await TriggerFanout(make_context()).handle_trigger(
            {"entity_id": ENTITY_ID, "skip_condition": True, "output_path": "2,5"}
        )

        first, second, third = runtime.sent[0]
        assert first is None
        assert second["payload"] == "on"
        assert third is None

    @pytest.mark.asyncio
    async def test_all_indices_dropped_sends_nothing(self, make_context, runtime, status_sink):
        await TriggerFanout(make_context()).handle_trigger(
            {"entity_id": ENTITY_ID, "skip_condition": True, "output_path": "9"}
        )

        assert runtime.sent == []
        status_sink.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_outputs_sends_nothing(self, make_context, runtime):
        runtime.wires = []

        await TriggerFanout(make_context()).handle_trigger(
            {"entity_id": ENTITY_ID, "skip_condition": True}
        )

        assert runtime.sent == []

    @pytest.mark.asyncio
    async def test_default_output_path_broadcasts(self, make_context, runtime):
        await TriggerFanout(make_context()).handle_trigger(
            {"entity_id": ENTITY_ID, "skip_condition": True}
        )

        assert runtime.sent[0] == [[runtime.sent[0][0][0]]] * 3

    @pytest.mark.asyncio
    async def test_status_dot_when_first_output_targeted(self, make_context, status_sink):
        await TriggerFanout(make_context()).handle_trigger(
            {"entity_id": ENTITY_ID, "skip_condition": True, "output_path": "1,2"}
        )

        status_sink.assert_called_once_with(
            {"fill": "blue", "shape": "dot", "text": "on at: Oct 16, 20:57"}
        )

    @pytest.mark.asyncio
    async def test_status_ring_otherwise(self, make_context, status_sink):
        await TriggerFanout(make_context()).handle_trigger(
            {"entity_id": ENTITY_ID, "skip_condition": True, "output_path": "3"}
        )

        assert status_sink.call_args.args[0]["shape"] == "ring"

    @pytest.mark.asyncio
    async def test_without_skip_condition_delegates_once(self, make_context, runtime, motion_state):
        """The node's own trigger handler runs and no fan-out happens."""
        trigger_node = AsyncMock()
        fanout = TriggerFanout(make_context(), trigger_node=trigger_node)

        await fanout.handle_trigger({"entity_id": ENTITY_ID, "output_path": "1"})

        trigger_node.assert_awaited_once_with(build_trigger_envelope(motion_state))
        assert runtime.sent == []

    @pytest.mark.asyncio
    async def test_sync_trigger_handler(self, make_context):
        trigger_node = MagicMock(return_value=None)

        await TriggerFanout(make_context(), trigger_node=trigger_node).handle_trigger(
            {"entity_id": ENTITY_ID}
        )

        trigger_node.assert_called_once()

    @pytest.mark.asyncio
    async def test_disabled_node_ignores_trigger(self, make_context, runtime):
        ctx = make_context()
        ctx.enabled = False
        trigger_node = AsyncMock()

        await TriggerFanout(ctx, trigger_node=trigger_node).handle_trigger(
            {"entity_id": ENTITY_ID, "skip_condition": True, "output_path": "1"}
        )

        trigger_node.assert_not_awaited()
        assert runtime.sent == []

    @pytest.mark.asyncio
    async def test_falls_back_to_node_entity_id(self, make_context, runtime):
        fanout = TriggerFanout(make_context(), get_node_entity_id=lambda: ENTITY_ID)

        await fanout.handle_trigger({"skip_condition": True, "output_path": "1"})

        assert runtime.sent[0]["topic"] == ENTITY_ID


class TestTriggerErrors:
    """Trigger errors become status and error log, never exceptions."""

    @pytest.mark.asyncio
    async def test_no_entity_id(self, make_context, runtime, status_sink):
        await TriggerFanout(make_context()).handle_trigger({"skip_condition": True})

        assert runtime.sent == []
        assert runtime.error_messages == [
            "Trigger Error: Entity filter type is not set to exact and no entity_id found "
            "in trigger data."
        ]
        status_sink.assert_called_once_with({"fill": "red", "shape": "ring", "text": "Error"})

    @pytest.mark.asyncio
    async def test_entity_not_in_cache(self, make_context, runtime):
        await TriggerFanout(make_context()).handle_trigger({"entity_id": "light.unknown"})

        assert runtime.error_messages == [
            "Trigger Error: entity_id provided by trigger event not found in cache: light.unknown"
        ]

    @pytest.mark.asyncio
    async def test_invalid_data(self, make_context, runtime):
        await TriggerFanout(make_context()).handle_trigger(
            {"entity_id": ENTITY_ID, "skip_condition": "sometimes"}
        )

        assert runtime.sent == []
        assert runtime.error_messages[0].startswith("Trigger Error: skip_condition")

    @pytest.mark.asyncio
    async def test_unknown_field_rejected(self, make_context, runtime):
        await TriggerFanout(make_context()).handle_trigger(
            {"entity_id": ENTITY_ID, "priority": "high"}
        )

        assert len(runtime.error_messages) == 1
        assert "priority" in runtime.error_messages[0]

    @pytest.mark.asyncio
    async def test_non_object_data_rejected(self, make_context, runtime, status_sink):
        await TriggerFanout(make_context()).handle_trigger("not-an-object")

        assert runtime.sent == []
        assert runtime.error_messages[0].startswith("Trigger Error: data: ")
        status_sink.assert_called_once_with({"fill": "red", "shape": "ring", "text": "Error"})
