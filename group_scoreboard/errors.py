from __future__ import annotations


class ScoreboardError(Exception):
    """Base class for scoreboard failures that carry a stable error code."""

    code = "scoreboard_error"

    def __init__(self, message: str | None = None):
        self.message = message or self.code
        super().__init__(self.message)


class ValidationError(ScoreboardError):
    """Raised when a join request carries no usable name."""

    code = "name_required"


class NotFoundError(ScoreboardError):
    """Raised when an update references an unknown participant id."""

    code = "participant_not_found"

    def __init__(self, participant_id: str):
        self.participant_id = participant_id
        super().__init__(f"Participant {participant_id!r} is not registered")


class PersistenceError(ScoreboardError):
    """Raised when the durable scoreboard record cannot be read or written."""

    code = "persistence_failed"
