"""
Dialectic - Performer/evaluator thinking tool for MCP clients.

This package provides a stateful MCP tool that records alternating
performer and evaluator turns, validates each submission, and reports
round progress. It can be hosted in-process through the Claude Agent SDK
or served standalone over stdio.
"""

from .agent import ThinkingAgent
from .server import create_stdio_server, create_thinking_server, create_tracker
from .session import Role, SessionTracker, SubmitOutcome, Thought, TurnProgress
from .thinking_tools import TOOL_NAME, build_thinking_tools, get_tracker

__version__ = "0.2.0"
__all__ = [
    "Role",
    "Thought",
    "SessionTracker",
    "SubmitOutcome",
    "TurnProgress",
    "TOOL_NAME",
    "build_thinking_tools",
    "get_tracker",
    "create_tracker",
    "create_thinking_server",
    "create_stdio_server",
    "ThinkingAgent",
]
