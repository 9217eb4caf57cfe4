import asyncio
import json

import pytest

from dialectic.session import SessionTracker
from dialectic.thinking_tools import (
    THOUGHT_INPUT_SCHEMA,
    TOOL_NAME,
    build_thinking_tools,
    get_tracker,
    to_tool_result,
)


@pytest.fixture()
def tracker():
    return SessionTracker()


@pytest.fixture()
def thinking_tool(tracker):
    (tool_def,) = build_thinking_tools(tracker)
    return tool_def


def _call(tool_def, args):
    return asyncio.run(tool_def.handler(args))


def test_tool_definition(thinking_tool):
    assert thinking_tool.name == TOOL_NAME == "dialectic_thinking"
    assert "performer" in thinking_tool.description
    assert thinking_tool.input_schema == THOUGHT_INPUT_SCHEMA


def test_schema_required_fields_and_roles():
    assert THOUGHT_INPUT_SCHEMA["required"] == [
        "content", "role", "continuationRequested", "turnIndex", "totalTurnsPlanned",
    ]
    props = THOUGHT_INPUT_SCHEMA["properties"]
    assert props["role"]["enum"] == ["performer", "evaluator"]
    assert props["turnIndex"]["minimum"] == 1
    assert props["totalTurnsPlanned"]["minimum"] == 3
    for name in ("assumptions", "evidence", "standardsApplied"):
        assert props[name]["type"] == "array"
        assert props[name]["items"] == {"type": "string"}


def test_success_result_is_json_progress(thinking_tool, tracker, first_turn):
    result = _call(thinking_tool, first_turn)

    assert "isError" not in result
    assert result["content"][0]["type"] == "text"
    payload = json.loads(result["content"][0]["text"])
    assert payload["currentRound"] == 1
    assert payload["nextRole"] == "evaluator"
    assert payload["isRoundComplete"] is False
    assert len(tracker) == 1


def test_failure_result_is_flagged(thinking_tool, tracker, first_turn):
    result = _call(thinking_tool, dict(first_turn, totalTurnsPlanned=4))

    assert result["isError"] is True
    payload = json.loads(result["content"][0]["text"])
    assert payload == {"error": "Invalid totalTurnsPlanned: must be odd", "status": "failed"}
    assert len(tracker) == 0


def test_tools_share_the_bound_tracker(tracker, first_turn, second_turn):
    (first,) = build_thinking_tools(tracker)
    (second,) = build_thinking_tools(tracker)

    _call(first, first_turn)
    result = _call(second, second_turn)

    payload = json.loads(result["content"][0]["text"])
    assert payload["historyLength"] == 2
    assert payload["isRoundComplete"] is True


def test_to_tool_result_is_pretty_printed(tracker, first_turn):
    text = to_tool_result(tracker.submit(first_turn))["content"][0]["text"]
    assert text.startswith("{\n  ")


def test_default_tracker_is_shared():
    tracker = get_tracker()

    assert isinstance(tracker, SessionTracker)
    assert get_tracker() is tracker
