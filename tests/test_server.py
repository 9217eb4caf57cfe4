import asyncio
import json

import mcp.types as types
import pytest

from dialectic.config import DialecticConfig
from dialectic.render import ThoughtRenderer
from dialectic.server import (
    create_parser,
    create_stdio_server,
    create_thinking_server,
    create_tracker,
    dispatch_tool_call,
    to_call_tool_result,
)
from dialectic.session import SessionTracker
from dialectic.thinking_tools import TOOL_NAME, build_thinking_tools


@pytest.fixture()
def tracker():
    return SessionTracker()


@pytest.fixture()
def tools_by_name(tracker):
    return {t.name: t for t in build_thinking_tools(tracker)}


def test_dispatch_accepted_thought(tools_by_name, tracker, first_turn):
    result = asyncio.run(dispatch_tool_call(tools_by_name, TOOL_NAME, first_turn))

    assert result.isError is False
    payload = json.loads(result.content[0].text)
    assert payload["currentRole"] == "performer"
    assert len(tracker) == 1


def test_dispatch_rejected_thought(tools_by_name, tracker, first_turn):
    result = asyncio.run(
        dispatch_tool_call(tools_by_name, TOOL_NAME, dict(first_turn, role="referee"))
    )

    assert result.isError is True
    assert json.loads(result.content[0].text)["status"] == "failed"
    assert len(tracker) == 0


def test_dispatch_without_arguments_is_a_validation_error(tools_by_name):
    result = asyncio.run(dispatch_tool_call(tools_by_name, TOOL_NAME, None))

    assert result.isError is True
    assert "Invalid content" in json.loads(result.content[0].text)["error"]


def test_dispatch_unknown_tool(tools_by_name):
    result = asyncio.run(dispatch_tool_call(tools_by_name, "sequential_thinking", {}))

    assert result.isError is True
    assert result.content[0].text == "Unknown tool: sequential_thinking"


def test_to_call_tool_result_keeps_text_blocks_only():
    result = to_call_tool_result({
        "content": [
            {"type": "text", "text": "hello"},
            {"type": "image", "source": {}},
        ],
    })

    assert [c.text for c in result.content] == ["hello"]
    assert result.isError is False


def test_create_thinking_server_returns_sdk_config(tracker):
    config = create_thinking_server(tracker, name="dialectic")

    assert config["type"] == "sdk"
    assert config["name"] == "dialectic"
    assert config["instance"] is not None


def test_create_stdio_server_uses_name(tracker):
    server = create_stdio_server(build_thinking_tools(tracker), name="thinker")
    assert server.name == "thinker"


def _call_over_protocol(server, arguments):
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=TOOL_NAME, arguments=arguments),
    )
    return asyncio.run(server.request_handlers[types.CallToolRequest](request)).root


@pytest.mark.parametrize(
    "changes, message",
    [
        ({"turnIndex": "1"}, "Invalid turnIndex: must be a non-zero number"),
        ({"totalTurnsPlanned": 4}, "Invalid totalTurnsPlanned: must be odd"),
        ({"totalTurnsPlanned": 1}, "Invalid totalTurnsPlanned: must be >= 3"),
    ],
)
def test_stdio_call_reports_tracker_errors(tracker, first_turn, changes, message):
    server = create_stdio_server(build_thinking_tools(tracker))

    result = _call_over_protocol(server, dict(first_turn, **changes))

    assert result.isError is True
    assert json.loads(result.content[0].text) == {"error": message, "status": "failed"}
    assert len(tracker) == 0


def test_stdio_call_accepts_thought(tracker, first_turn):
    server = create_stdio_server(build_thinking_tools(tracker))

    result = _call_over_protocol(server, first_turn)

    assert result.isError is False
    assert json.loads(result.content[0].text)["nextRole"] == "evaluator"
    assert len(tracker) == 1


def test_stdio_lists_thinking_tool(tracker):
    server = create_stdio_server(build_thinking_tools(tracker))

    result = asyncio.run(
        server.request_handlers[types.ListToolsRequest](types.ListToolsRequest(method="tools/list"))
    ).root

    assert [t.name for t in result.tools] == [TOOL_NAME]
    assert result.tools[0].inputSchema["required"][0] == "content"


def test_create_tracker_respects_render_setting():
    rendered = create_tracker(DialecticConfig(render_thoughts=True, render_width=60))
    silent = create_tracker(DialecticConfig(render_thoughts=False))

    assert isinstance(rendered._renderer, ThoughtRenderer)
    assert rendered._renderer.max_width == 60
    assert silent._renderer is None


def test_parser_defaults_leave_config_untouched():
    args = create_parser().parse_args([])

    assert args.log_level is None
    assert args.log_directory is None
    assert args.no_render is False
    assert args.render_width is None


def test_parser_flags():
    args = create_parser().parse_args(
        ["--log-level", "DEBUG", "--no-render", "--render-width", "72", "--run-id", "abc"]
    )

    assert args.log_level == "DEBUG"
    assert args.no_render is True
    assert args.render_width == 72
    assert args.run_id == "abc"
