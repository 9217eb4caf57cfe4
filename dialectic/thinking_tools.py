"""
Dialectic Thinking MCP Tool - Performer/evaluator thinking exposed to Claude.

The tool uses the @tool decorator from claude-agent-sdk to create an
in-process MCP tool. Each call is handed to a SessionTracker; the outcome
is encoded as JSON text, with isError set when the thought was rejected.
"""

import json
import threading
from typing import Any, Dict, List, Optional

from claude_agent_sdk import SdkMcpTool, tool

from .logger import get_logger
from .session import SessionTracker, SubmitOutcome

_logger = get_logger()

TOOL_NAME = "dialectic_thinking"

TOOL_DESCRIPTION = """A tool for dual-perspective analysis grounded in critical thinking practice.
Each thought alternates between the 'performer' (proposer/creator) and the 'evaluator' (critic/analyst), building a dialectical exchange that limits bias and deepens the reasoning.

### Critical Thinking Framework
#### 1. Universal Intellectual Standards (the evaluator's checklist)
The evaluator tests the performer's input against these standards:
- Clarity: Is the point stated clearly and free from ambiguity?
- Accuracy: Is the claim true? Can it be verified by evidence?
- Precision: Is it specific enough? Are details provided?
- Relevance: How does this relate to the core problem?
- Depth: Does it address the complexities and underlying issues?
- Breadth: Are other perspectives or counter-arguments considered?
- Logic: Does the conclusion follow from the premises?
- Significance: Is this the most important factor to consider?
- Fairness: Is the assessment unbiased toward all stakeholders?

#### 2. Elements of Thought (the performer's guide)
The performer states their position by identifying:
- Purpose: What is the goal of this action or decision?
- Question at Issue: What specific problem is being addressed?
- Information: What data, facts, or experiences are being used?
- Inferences/Conclusions: What interpretations are being made?
- Concepts: What theories, definitions, or laws govern this thinking?
- Assumptions: What is being taken for granted?
- Implications/Consequences: What happens if this line of thought is followed?
- Points of View: From what perspective are we looking at this?

### Workflow
1. Start with either the performer or the evaluator.
2. Alternate roles; turn 1 is the round-1 performer, turn 2 the round-1 evaluator, and so on.
3. State assumptions and evidence explicitly in each turn.
4. Keep totalTurnsPlanned odd and at least 3; adjust it as the exchange evolves.
5. Set continuationRequested to false ONLY once a robust consensus or final evaluation is reached."""

THOUGHT_INPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "content": {
            "type": "string",
            "description": "Your current analysis from the specified role's perspective",
        },
        "role": {
            "type": "string",
            "enum": ["performer", "evaluator"],
            "description": "'performer' for the creative/proposing viewpoint, 'evaluator' for the analytical/critiquing viewpoint",
        },
        "continuationRequested": {
            "type": "boolean",
            "description": "Whether another turn of performer/evaluator dialogue is needed",
        },
        "turnIndex": {
            "type": "integer",
            "description": "Current turn number in the sequence",
            "minimum": 1,
        },
        "totalTurnsPlanned": {
            "type": "integer",
            "description": "Total number of turns planned (must be odd and >= 3)",
            "minimum": 3,
        },
        "assumptions": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Key assumptions made in this turn",
        },
        "evidence": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Data, facts, or observations supporting this turn",
        },
        "standardsApplied": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Intellectual standards (Clarity, Logic, etc.) applied in this turn, mainly by the evaluator",
        },
    },
    "required": ["content", "role", "continuationRequested", "turnIndex", "totalTurnsPlanned"],
}


_tracker: Optional[SessionTracker] = None
_tracker_lock = threading.Lock()


def get_tracker() -> SessionTracker:
    """Get the process-wide default tracker, creating it on first use."""
    global _tracker
    with _tracker_lock:
        if _tracker is None:
            _tracker = SessionTracker()
        return _tracker


def to_tool_result(outcome: SubmitOutcome) -> Dict[str, Any]:
    """Encode a SubmitOutcome as an MCP tool result."""
    result: Dict[str, Any] = {
        "content": [{"type": "text", "text": json.dumps(outcome.to_payload(), indent=2)}]
    }
    if not outcome.accepted:
        result["isError"] = True
    return result


def build_thinking_tools(tracker: SessionTracker) -> List[SdkMcpTool]:
    """Create the thinking tools bound to a tracker.

    Args:
        tracker: Session that receives every submission

    Returns:
        List of SDK MCP tools, ready for create_sdk_mcp_server()
    """

    @tool(TOOL_NAME, TOOL_DESCRIPTION, THOUGHT_INPUT_SCHEMA)
    async def dialectic_thinking(args: Dict[str, Any]) -> Dict[str, Any]:
        """Record one performer or evaluator turn and report progress."""
        _logger.debug("thinking_tools", "thinking_called", {
            "role": args.get("role") if isinstance(args, dict) else None,
            "turn_index": args.get("turnIndex") if isinstance(args, dict) else None,
        })
        return to_tool_result(tracker.submit(args))

    return [dialectic_thinking]

