"""
Validation errors raised while turning a raw tool payload into a Thought.

Each error kind maps to exactly one malformed-field condition. All of them
are recoverable: the caller fixes the payload and submits again.
"""


class ThoughtValidationError(ValueError):
    """Base class for rejected thought submissions.

    Attributes:
        kind: Stable identifier of the failed check (e.g. "InvalidRole")
        message: Human-readable reason returned to the caller
    """

    kind = "ThoughtValidationError"
    default_message = "Invalid thought"

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidContent(ThoughtValidationError):
    kind = "InvalidContent"
    default_message = "Invalid content: must be a non-empty string"


class InvalidRole(ThoughtValidationError):
    kind = "InvalidRole"
    default_message = 'Invalid role: must be either "performer" or "evaluator"'


class InvalidContinuationFlag(ThoughtValidationError):
    kind = "InvalidContinuationFlag"
    default_message = "Invalid continuationRequested: must be a boolean"


class InvalidTurnIndex(ThoughtValidationError):
    kind = "InvalidTurnIndex"
    default_message = "Invalid turnIndex: must be a non-zero number"


class InvalidTotalTurns(ThoughtValidationError):
    kind = "InvalidTotalTurns"
    default_message = "Invalid totalTurnsPlanned: must be a non-zero number"


class TotalTurnsTooSmall(ThoughtValidationError):
    kind = "TotalTurnsTooSmall"
    default_message = "Invalid totalTurnsPlanned: must be >= 3"


class TotalTurnsMustBeOdd(ThoughtValidationError):
    kind = "TotalTurnsMustBeOdd"
    default_message = "Invalid totalTurnsPlanned: must be odd"
