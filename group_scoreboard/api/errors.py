from __future__ import annotations

from typing import Any

from group_scoreboard.errors import NotFoundError, PersistenceError, ScoreboardError, ValidationError

STATUS_BY_ERROR: dict[type[ScoreboardError], int] = {
    ValidationError: 400,
    NotFoundError: 404,
    PersistenceError: 500,
}


class APIError(Exception):
    def __init__(
        self,
        code: str,
        message: str,
        status_code: int,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)

    @classmethod
    def from_scoreboard_error(cls, exc: ScoreboardError) -> APIError:
        status_code = STATUS_BY_ERROR.get(type(exc), 500)
        return cls(code=exc.code, message=exc.message, status_code=status_code)
