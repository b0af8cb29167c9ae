"""Pydantic request/response schemas for the group scoreboard API.

Request bodies are deliberately loose: field values are coerced by the
registry's normalization rules rather than rejected here. Responses use the
camelCase keys the game clients and the durable record share.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from group_scoreboard.services.registry import ParticipantRecord


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorBody(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    error: ErrorBody


class JoinRequest(BaseModel):
    name: Any = None


class UpdateRequest(BaseModel):
    id: Any = None
    stats: Any = None


class Participant(CamelModel):
    id: str
    name: str
    total_mistakes: int | float
    round_mistakes: int | float
    completed_rounds: int | float
    total_found: int | float
    last_round_ms: int | float
    best_round_ms: int | float
    current_mini_game: str
    current_mini_game_index: int | float
    updated_at: str

    @classmethod
    def from_record(cls, record: ParticipantRecord) -> Participant:
        return cls.model_validate(record.to_document())


class JoinResponse(CamelModel):
    id: str
    participant: Participant
    participants: list[Participant]


class UpdateResponse(CamelModel):
    ok: Literal[True] = True
    participant: Participant
    participants: list[Participant]


class ScoreboardResponse(CamelModel):
    updated_at: str
    participants: list[Participant]


class HealthResponse(BaseModel):
    status: Literal["ok"]


class ReadyResponse(BaseModel):
    status: Literal["ok"]
