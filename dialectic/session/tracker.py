"""
Session Tracker - Owns the thought history and round bookkeeping.

Each submission is validated first and only committed when every check
passes, so a rejected payload never touches the session. The tracker
trusts the caller's sequencing: turnIndex is not checked against earlier
submissions and nextRole is advisory.

Callers that need isolated sessions construct independent trackers.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..logger import get_logger
from .errors import ThoughtValidationError
from .thought import Role, Thought, validate_thought


@dataclass(frozen=True)
class TurnProgress:
    """Progress metadata returned for an accepted thought."""
    turn_index: float
    total_turns_planned: float
    current_round: int
    current_role: Role
    next_role: Role
    is_round_complete: bool
    continuation_requested: bool
    history_length: int
    performer_count: int
    evaluator_count: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire (camelCase) representation."""
        return {
            "turnIndex": self.turn_index,
            "totalTurnsPlanned": self.total_turns_planned,
            "currentRound": self.current_round,
            "currentRole": self.current_role.value,
            "nextRole": self.next_role.value,
            "isRoundComplete": self.is_round_complete,
            "continuationRequested": self.continuation_requested,
            "historyLength": self.history_length,
            "performerCount": self.performer_count,
            "evaluatorCount": self.evaluator_count,
        }


@dataclass(frozen=True)
class SubmitOutcome:
    """Result of SessionTracker.submit: either progress or a validation error."""
    progress: Optional[TurnProgress] = None
    error: Optional[ThoughtValidationError] = None

    @property
    def accepted(self) -> bool:
        return self.progress is not None

    def to_payload(self) -> Dict[str, Any]:
        """Build the JSON-ready payload sent back to the caller."""
        if self.progress is not None:
            return self.progress.to_dict()
        return {"error": self.error.message, "status": "failed"}


class SessionTracker:
    """Tracks an alternating performer/evaluator exchange.

    Example:
        tracker = SessionTracker()
        outcome = tracker.submit({
            "content": "Draft the opening argument",
            "role": "performer",
            "continuationRequested": True,
            "turnIndex": 1,
            "totalTurnsPlanned": 3,
        })
        outcome.progress.next_role  # Role.EVALUATOR
    """

    def __init__(self, renderer: Optional[Callable[[Thought], None]] = None):
        """Initialize an empty session.

        Args:
            renderer: Optional callable shown each accepted thought for
                diagnostic display. It has no effect on state or results.
        """
        self._history: List[Thought] = []
        self._current_round = 1
        self._renderer = renderer
        self._logger = get_logger()

    @property
    def history(self) -> Tuple[Thought, ...]:
        """Accepted thoughts in submission order."""
        return tuple(self._history)

    @property
    def current_round(self) -> int:
        """Round of the most recently accepted thought."""
        return self._current_round

    @property
    def performer_count(self) -> int:
        return sum(1 for t in self._history if t.role is Role.PERFORMER)

    @property
    def evaluator_count(self) -> int:
        return sum(1 for t in self._history if t.role is Role.EVALUATOR)

    def __len__(self) -> int:
        return len(self._history)

    def submit(self, raw: Any) -> SubmitOutcome:
        """Validate a raw payload and, if valid, record it.

        Args:
            raw: Untyped tool arguments

        Returns:
            SubmitOutcome carrying TurnProgress on success, or the first
            validation error on failure (in which case nothing is recorded)
        """
        try:
            thought = validate_thought(raw)
        except ThoughtValidationError as e:
            self._logger.warn("tracker", "thought_rejected", {
                "kind": e.kind,
                "error": e.message,
                "history_length": len(self._history),
            })
            return SubmitOutcome(error=e)

        self._history.append(thought)
        self._current_round = thought.round

        progress = TurnProgress(
            turn_index=thought.turn_index,
            total_turns_planned=thought.total_turns_planned,
            current_round=self._current_round,
            current_role=thought.role,
            next_role=thought.role.opposite,
            is_round_complete=thought.completes_round,
            continuation_requested=thought.continuation_requested,
            history_length=len(self._history),
            performer_count=self.performer_count,
            evaluator_count=self.evaluator_count,
        )

        self._logger.info("tracker", "thought_accepted", {
            "role": thought.role.value,
            "turn_index": thought.turn_index,
            "round": self._current_round,
            "round_complete": progress.is_round_complete,
            "continuation_requested": thought.continuation_requested,
            "history_length": progress.history_length,
        })

        self._render(thought)
        return SubmitOutcome(progress=progress)

    def _render(self, thought: Thought) -> None:
        if self._renderer is None:
            return
        try:
            self._renderer(thought)
        except Exception as e:
            # Display problems must not undo an accepted submission
            self._logger.error("tracker", "render_failed", {"error": e})
