"""
Thinking Agent - Claude agent that reasons through the dialectic tool.

This module provides a ThinkingAgent class that wraps the Claude SDK and
hosts the dialectic_thinking tool in-process, so Claude can work a problem
through alternating performer and evaluator turns.
"""

import shutil
from typing import Any, AsyncIterator, Dict, List, Optional

from claude_agent_sdk import ClaudeAgentOptions, ClaudeSDKClient

from .logger import get_logger
from .server import create_thinking_server, create_tracker
from .session import SessionTracker
from .thinking_tools import TOOL_NAME

SERVER_NAME = "dialectic"

THINKING_SYSTEM_PROMPT = """You reason through problems as a dialogue between two roles using the dialectic_thinking tool:

1. **Performer**: propose, build, and argue for a position. State purpose, information, inferences, and assumptions.
2. **Evaluator**: test the performer's last turn against clarity, accuracy, precision, relevance, depth, breadth, logic, significance, and fairness.

When working a problem:
- Submit one tool call per turn, alternating roles (turn 1 performer, turn 2 evaluator, ...)
- Keep totalTurnsPlanned odd and at least 3
- List assumptions and evidence explicitly
- Set continuationRequested to false only when the exchange has reached a sound conclusion

Then give the user a concise answer that reflects the final evaluation."""


class ThinkingAgent:
    """Claude agent with the dialectic thinking tool.

    Example:
        agent = ThinkingAgent()
        await agent.start()

        async for block in agent.query("Should we shard the orders table?"):
            if block["type"] == "text":
                print(block["text"], end="")

        await agent.stop()
    """

    def __init__(
        self,
        system_prompt: Optional[str] = None,
        tracker: Optional[SessionTracker] = None,
        max_turns: Optional[int] = None,
        model: Optional[str] = None,
    ):
        """Initialize the thinking agent.

        Args:
            system_prompt: Custom system prompt (uses default if None)
            tracker: Session to record turns in (a fresh one if None)
            max_turns: Maximum conversation turns (None for unlimited)
            model: Claude model ID (SDK default if None)
        """
        self.system_prompt = system_prompt or THINKING_SYSTEM_PROMPT
        self.tracker = tracker if tracker is not None else create_tracker()
        self.max_turns = max_turns
        self.model = model
        self.client: Optional[ClaudeSDKClient] = None
        self._session_id: Optional[str] = None
        self._logger = get_logger()

        self.mcp_server = create_thinking_server(self.tracker, name=SERVER_NAME)
        self.allowed_tools: List[str] = [f"mcp__{SERVER_NAME}__{TOOL_NAME}"]

    def _get_options(self) -> ClaudeAgentOptions:
        """Get ClaudeAgentOptions for the client."""
        options = ClaudeAgentOptions(
            system_prompt=self.system_prompt,
            mcp_servers={SERVER_NAME: self.mcp_server},
            allowed_tools=self.allowed_tools,
        )

        if self.max_turns:
            options.max_turns = self.max_turns
        if self.model:
            options.model = self.model

        # Prefer an installed CLI; otherwise the SDK uses its bundled one
        cli_path = shutil.which("claude")
        if cli_path:
            options.cli_path = cli_path

        return options

    async def start(self) -> None:
        """Start the SDK client.

        Raises:
            RuntimeError: If the SDK client fails to start
        """
        try:
            options = self._get_options()
        except Exception as e:
            raise RuntimeError(f"Failed to configure agent options: {e}") from e

        try:
            self.client = ClaudeSDKClient(options=options)
            await self.client.connect()
        except Exception as e:
            self.client = None
            raise RuntimeError(f"Failed to start Claude SDK client: {e}") from e

        self._logger.info("agent", "started", {"allowed_tools": self.allowed_tools})

    async def stop(self) -> None:
        """Stop the agent client."""
        if self.client:
            await self.client.disconnect()
            self.client = None
            self._logger.info("agent", "stopped", {"history_length": len(self.tracker)})

    async def query(self, prompt: str) -> AsyncIterator[Dict[str, Any]]:
        """Send a query and yield response content.

        Args:
            prompt: User's message/query

        Yields:
            Dict with 'type' and content:
            - {"type": "text", "text": "..."}
            - {"type": "tool_use", "name": "...", "input": {...}}
        """
        if not self.client:
            raise RuntimeError("Agent not started. Call start() first.")

        await self.client.query(prompt)

        async for message in self.client.receive_response():
            msg_type = type(message).__name__

            if msg_type == "AssistantMessage":
                for block in getattr(message, "content", []):
                    if hasattr(block, "text"):
                        yield {"type": "text", "text": block.text}
                    elif hasattr(block, "name"):  # Tool use block
                        yield {
                            "type": "tool_use",
                            "name": block.name,
                            "input": getattr(block, "input", {}),
                        }

            elif msg_type == "ResultMessage":
                self._session_id = getattr(message, "session_id", self._session_id)

    @property
    def session_id(self) -> Optional[str]:
        """Claude session ID of the last completed query."""
        return self._session_id
