"""
Session - Thought validation and round bookkeeping for a single exchange.
"""

from .errors import (
    InvalidContent,
    InvalidContinuationFlag,
    InvalidRole,
    InvalidTotalTurns,
    InvalidTurnIndex,
    ThoughtValidationError,
    TotalTurnsMustBeOdd,
    TotalTurnsTooSmall,
)
from .thought import Role, Thought, validate_thought
from .tracker import SessionTracker, SubmitOutcome, TurnProgress

__all__ = [
    "Role",
    "Thought",
    "validate_thought",
    "SessionTracker",
    "SubmitOutcome",
    "TurnProgress",
    "ThoughtValidationError",
    "InvalidContent",
    "InvalidRole",
    "InvalidContinuationFlag",
    "InvalidTurnIndex",
    "InvalidTotalTurns",
    "TotalTurnsTooSmall",
    "TotalTurnsMustBeOdd",
]
