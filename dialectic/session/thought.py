"""
Thought model and payload validation.

A Thought is one submitted turn of a performer/evaluator exchange. Raw
payloads arrive untyped from the tool host; validate_thought() runs an
ordered chain of checks (first failure wins) and returns a typed Thought.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from .errors import (
    InvalidContent,
    InvalidContinuationFlag,
    InvalidRole,
    InvalidTotalTurns,
    InvalidTurnIndex,
    TotalTurnsMustBeOdd,
    TotalTurnsTooSmall,
)

MIN_TOTAL_TURNS = 3


class Role(str, Enum):
    """Perspective a thought is written from."""
    PERFORMER = "performer"
    EVALUATOR = "evaluator"

    @property
    def opposite(self) -> "Role":
        """The role expected to answer this one."""
        if self is Role.PERFORMER:
            return Role.EVALUATOR
        return Role.PERFORMER


@dataclass(frozen=True)
class Thought:
    """A validated turn.

    Attributes:
        content: The substantive statement for this turn
        role: Performer or evaluator
        turn_index: Caller-supplied 1-based position in the exchange
        total_turns_planned: Caller's current estimate of total turns (odd, >= 3)
        continuation_requested: Whether the caller wants another turn after this one
        assumptions: Key assumptions, or None when not supplied
        evidence: Supporting facts, or None when not supplied
        standards_applied: Intellectual standards applied, or None when not supplied
    """
    content: str
    role: Role
    turn_index: float
    total_turns_planned: float
    continuation_requested: bool
    assumptions: Optional[Tuple[str, ...]] = None
    evidence: Optional[Tuple[str, ...]] = None
    standards_applied: Optional[Tuple[str, ...]] = None

    @property
    def round(self) -> int:
        """Round number; turns 1-2 are round 1, turns 3-4 round 2, and so on."""
        if isinstance(self.turn_index, int):
            # Integer ceiling division stays exact beyond float precision
            return -(-self.turn_index // 2)
        return math.ceil(self.turn_index / 2)

    @property
    def completes_round(self) -> bool:
        return self.turn_index % 2 == 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire (camelCase) representation."""
        data: Dict[str, Any] = {
            "content": self.content,
            "role": self.role.value,
            "turnIndex": self.turn_index,
            "totalTurnsPlanned": self.total_turns_planned,
            "continuationRequested": self.continuation_requested,
        }
        if self.assumptions is not None:
            data["assumptions"] = list(self.assumptions)
        if self.evidence is not None:
            data["evidence"] = list(self.evidence)
        if self.standards_applied is not None:
            data["standardsApplied"] = list(self.standards_applied)
        return data


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid count
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if isinstance(value, float):
        return math.isfinite(value)
    return True


def _check_content(data: Mapping) -> None:
    content = data.get("content")
    if not content or not isinstance(content, str):
        raise InvalidContent()


def _check_role(data: Mapping) -> None:
    if data.get("role") not in (Role.PERFORMER.value, Role.EVALUATOR.value):
        raise InvalidRole()


def _check_continuation(data: Mapping) -> None:
    if not isinstance(data.get("continuationRequested"), bool):
        raise InvalidContinuationFlag()


def _check_turn_index(data: Mapping) -> None:
    value = data.get("turnIndex")
    if not _is_number(value) or not value:
        raise InvalidTurnIndex()


def _check_total_turns(data: Mapping) -> None:
    value = data.get("totalTurnsPlanned")
    if not _is_number(value) or not value:
        raise InvalidTotalTurns()


def _check_total_turns_minimum(data: Mapping) -> None:
    if data["totalTurnsPlanned"] < MIN_TOTAL_TURNS:
        raise TotalTurnsTooSmall()


def _check_total_turns_odd(data: Mapping) -> None:
    if data["totalTurnsPlanned"] % 2 == 0:
        raise TotalTurnsMustBeOdd()


# Order matters: later checks assume earlier ones passed.
THOUGHT_CHECKS: Tuple[Callable[[Mapping], None], ...] = (
    _check_content,
    _check_role,
    _check_continuation,
    _check_turn_index,
    _check_total_turns,
    _check_total_turns_minimum,
    _check_total_turns_odd,
)


def _optional_strings(value: Any) -> Optional[Tuple[str, ...]]:
    """Keep list-shaped values, treat anything else as not supplied."""
    if not isinstance(value, (list, tuple)):
        return None
    return tuple(str(item) for item in value)


def validate_thought(raw: Any) -> Thought:
    """Validate an untyped payload and build a Thought.

    Args:
        raw: Tool arguments as delivered by the host (usually a dict)

    Returns:
        The validated Thought

    Raises:
        ThoughtValidationError: The first failed check, in THOUGHT_CHECKS order
    """
    data: Mapping = raw if isinstance(raw, Mapping) else {}

    for check in THOUGHT_CHECKS:
        check(data)

    return Thought(
        content=data["content"],
        role=Role(data["role"]),
        turn_index=data["turnIndex"],
        total_turns_planned=data["totalTurnsPlanned"],
        continuation_requested=data["continuationRequested"],
        assumptions=_optional_strings(data.get("assumptions")),
        evidence=_optional_strings(data.get("evidence")),
        standards_applied=_optional_strings(data.get("standardsApplied")),
    )
