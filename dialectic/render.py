"""
Diagnostic rendering of accepted thoughts.

Renders a thought as a bordered box for a human watching the server's
stderr. Pure presentation: nothing here affects session state or results.
"""

import sys
from typing import List, Optional, TextIO

from .session.thought import Role, Thought

ROLE_BADGES = {
    Role.PERFORMER: "🎭 Performer",
    Role.EVALUATOR: "🔍 Evaluator",
}


def _detail_lines(thought: Thought) -> List[str]:
    details = []
    for label, values in (
        ("Assumptions", thought.assumptions),
        ("Evidence", thought.evidence),
        ("Standards Applied", thought.standards_applied),
    ):
        if values:
            details.append(f"  ↳ {label}: {', '.join(values)}")
    return details


def format_thought(thought: Thought, max_width: int = 100) -> str:
    """Render a thought as a bordered box.

    Args:
        thought: The accepted thought
        max_width: Upper bound on the border length

    Returns:
        Multi-line string (no trailing newline)
    """
    header = (
        f"{ROLE_BADGES[thought.role]} - Round {thought.round} "
        f"(Turn {thought.turn_index})"
    )
    first_line = thought.content.split("\n")[0]
    border = "─" * min(max_width, max(len(header), len(first_line)) + 4)

    lines = [
        f"┌{border}┐",
        f"│ {header} │",
        f"├{border}┤",
        f"│ {thought.content} │",
    ]

    details = _detail_lines(thought)
    if details:
        lines.append(f"├{border}┤")
        lines.extend(details)

    lines.append(f"└{border}┘")
    return "\n".join(lines)


class ThoughtRenderer:
    """Callable renderer handed to SessionTracker.

    Writes to stderr by default; stdout carries the MCP stdio transport.
    """

    def __init__(self, stream: Optional[TextIO] = None, max_width: int = 100):
        self.stream = stream
        self.max_width = max_width

    def __call__(self, thought: Thought) -> None:
        stream = self.stream or sys.stderr
        stream.write(format_thought(thought, self.max_width) + "\n")
        stream.flush()
