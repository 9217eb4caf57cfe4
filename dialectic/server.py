"""
Dialectic MCP Server - Hosts the thinking tool in-process or over stdio.

Two hosts share the same tool definitions:
- create_thinking_server(): in-process SDK server for ClaudeAgentOptions
- create_stdio_server(): standalone MCP server for any stdio client

Usage:
    dialectic-server                    # Serve over stdio
    dialectic-server --no-render        # Don't draw thoughts on stderr
    dialectic-server --log-level DEBUG  # Verbose structured logs
"""

import argparse
import asyncio
import sys
from typing import Any, Dict, List, Optional

import mcp.types as types
from claude_agent_sdk import McpSdkServerConfig, SdkMcpTool, create_sdk_mcp_server
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from .config import DialecticConfig, load_config
from .logger import get_logger
from .logging_config import configure_from_config, set_run_id
from .render import ThoughtRenderer
from .session import SessionTracker
from .thinking_tools import build_thinking_tools

SERVER_VERSION = "0.2.0"

_logger = get_logger()


def create_tracker(config: Optional[DialecticConfig] = None) -> SessionTracker:
    """Create a tracker, wired to the stderr renderer when enabled."""
    config = config or DialecticConfig()
    renderer = None
    if config.render_thoughts:
        renderer = ThoughtRenderer(max_width=config.render_width)
    return SessionTracker(renderer=renderer)


def create_thinking_server(
    tracker: SessionTracker,
    name: str = "dialectic",
) -> McpSdkServerConfig:
    """Create the in-process SDK MCP server for a tracker.

    Tools are exposed to Claude as mcp__<name>__dialectic_thinking.
    """
    return create_sdk_mcp_server(
        name=name,
        version=SERVER_VERSION,
        tools=build_thinking_tools(tracker),
    )


def _error_result(text: str) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        isError=True,
    )


def to_call_tool_result(result: Dict[str, Any]) -> types.CallToolResult:
    """Convert an SDK tool result dict to an MCP CallToolResult."""
    content = [
        types.TextContent(type="text", text=item["text"])
        for item in result.get("content", [])
        if item.get("type") == "text"
    ]
    return types.CallToolResult(content=content, isError=bool(result.get("isError", False)))


async def dispatch_tool_call(
    tools: Dict[str, SdkMcpTool],
    name: str,
    arguments: Any,
) -> types.CallToolResult:
    """Route a tools/call request to the matching tool handler.

    Args:
        tools: Tools keyed by name
        name: Requested tool name
        arguments: Untyped arguments from the client

    Returns:
        CallToolResult; unknown tools yield an error result
    """
    tool_def = tools.get(name)
    if tool_def is None:
        _logger.warn("server", "unknown_tool", {"tool": name})
        return _error_result(f"Unknown tool: {name}")

    with _logger.span("server", "call_tool", {"tool": name}) as span:
        result = await tool_def.handler(arguments if arguments is not None else {})
        span.set_data({"is_error": bool(result.get("isError", False))})

    return to_call_tool_result(result)


def create_stdio_server(tools: List[SdkMcpTool], name: str = "dialectic") -> Server:
    """Create a low-level MCP server that lists and dispatches the given tools."""
    server = Server(name, version=SERVER_VERSION)
    tools_by_name = {t.name: t for t in tools}

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return [
            types.Tool(name=t.name, description=t.description, inputSchema=t.input_schema)
            for t in tools
        ]

    # The tracker reports malformed payloads itself, so the host does not
    # pre-validate against the advertised schema.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Dict[str, Any]) -> types.CallToolResult:
        return await dispatch_tool_call(tools_by_name, name, arguments)

    return server


async def serve_stdio(server: Server) -> None:
    """Run the server on stdin/stdout until the client disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description="Serve the dialectic (performer/evaluator) thinking tool over MCP stdio",
    )

    parser.add_argument(
        "--project-root",
        dest="project_root",
        help="Directory containing .dialectic/config.json (default: cwd)"
    )

    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["TRACE", "DEBUG", "INFO", "WARN", "ERROR"],
        help="Structured log level"
    )

    parser.add_argument(
        "--log-dir",
        dest="log_directory",
        help="Directory for JSON-lines log files"
    )

    parser.add_argument(
        "--no-render",
        dest="no_render",
        action="store_true",
        help="Don't draw accepted thoughts on stderr"
    )

    parser.add_argument(
        "--render-width",
        dest="render_width",
        type=int,
        help="Maximum width of the thought rendering (default: 100)"
    )

    parser.add_argument(
        "--run-id",
        dest="run_id",
        help="Run ID stamped on every log entry"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 on clean shutdown, 1 on transport failure).
    """
    args = create_parser().parse_args(argv)

    config = load_config(
        project_root=args.project_root,
        overrides={
            "log_level": args.log_level,
            "log_directory": args.log_directory,
            "render_thoughts": False if args.no_render else None,
            "render_width": args.render_width,
        },
    )
    configure_from_config(config)
    set_run_id(args.run_id)

    tracker = create_tracker(config)
    server = create_stdio_server(build_thinking_tools(tracker), name=config.server_name)

    _logger.info("server", "starting", {"config": config.to_dict(), "version": SERVER_VERSION})
    print("Dialectic Thinking MCP Server running on stdio", file=sys.stderr)

    try:
        asyncio.run(serve_stdio(server))
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        _logger.error("server", "fatal_error", {"error": e})
        print(f"Fatal error running server: {e}", file=sys.stderr)
        return 1
    finally:
        _logger.info("server", "stopped", {"history_length": len(tracker)})
        _logger.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
