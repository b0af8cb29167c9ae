"""In-memory participant registry and its merge rules for progress updates."""

from __future__ import annotations

import secrets
import string
import time
import uuid
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from group_scoreboard.errors import NotFoundError, ValidationError
from group_scoreboard.services.normalize import (
    Number,
    clean_id,
    clean_name,
    coerce_label,
    non_negative,
    now_iso,
    safe_number,
)

# Wire key -> attribute for the counters clamped at zero.
COUNTER_FIELDS = {
    "totalMistakes": "total_mistakes",
    "roundMistakes": "round_mistakes",
    "completedRounds": "completed_rounds",
    "totalFound": "total_found",
    "lastRoundMs": "last_round_ms",
    "bestRoundMs": "best_round_ms",
}

_ID_ALPHABET = string.ascii_lowercase + string.digits


@dataclass(slots=True)
class ParticipantRecord:
    id: str
    name: str
    updated_at: str
    total_mistakes: Number = 0
    round_mistakes: Number = 0
    completed_rounds: Number = 0
    total_found: Number = 0
    last_round_ms: Number = 0
    best_round_ms: Number = 0
    current_mini_game: str = ""
    current_mini_game_index: Number = 0

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "totalMistakes": self.total_mistakes,
            "roundMistakes": self.round_mistakes,
            "completedRounds": self.completed_rounds,
            "totalFound": self.total_found,
            "lastRoundMs": self.last_round_ms,
            "bestRoundMs": self.best_round_ms,
            "currentMiniGame": self.current_mini_game,
            "currentMiniGameIndex": self.current_mini_game_index,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_document(cls, row: Any, default_updated_at: str) -> ParticipantRecord | None:
        """Rebuild a persisted row, or return ``None`` when it is unusable."""
        if not isinstance(row, Mapping):
            return None
        participant_id = clean_id(row.get("id"))
        name = clean_name(row.get("name"))
        if not participant_id or not name:
            return None

        record = cls(
            id=participant_id,
            name=name,
            updated_at=str(row.get("updatedAt") or default_updated_at),
            current_mini_game=coerce_label(row.get("currentMiniGame")),
            current_mini_game_index=safe_number(row.get("currentMiniGameIndex")),
        )
        for key, attr in COUNTER_FIELDS.items():
            setattr(record, attr, safe_number(row.get(key)))
        return record


def generate_id() -> str:
    try:
        return str(uuid.uuid4())
    except OSError:
        # uuid4 needs os.urandom; fall back to time plus a random suffix.
        suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(8))
        return f"{int(time.time() * 1000)}-{suffix}"


class ParticipantRegistry:
    def __init__(
        self,
        clock: Callable[[], str] = now_iso,
        id_factory: Callable[[], str] = generate_id,
    ):
        self._participants: dict[str, ParticipantRecord] = {}
        self._clock = clock
        self._id_factory = id_factory

    def __len__(self) -> int:
        return len(self._participants)

    def __contains__(self, participant_id: object) -> bool:
        return participant_id in self._participants

    def create(self, name: Any) -> ParticipantRecord:
        cleaned = clean_name(name)
        if not cleaned:
            raise ValidationError("A non-empty name is required to join")

        participant_id = self._id_factory()
        while participant_id in self._participants:
            participant_id = self._id_factory()

        record = ParticipantRecord(id=participant_id, name=cleaned, updated_at=self._clock())
        self._participants[participant_id] = record
        return record

    def apply_patch(self, participant_id: Any, patch: Any) -> ParticipantRecord:
        """Merge the keys present in ``patch`` into an existing record.

        Absent keys keep their current value, unknown keys are ignored and
        ``updatedAt`` is refreshed even when nothing else changes.
        """
        record = self.get(participant_id)
        if record is None:
            raise NotFoundError(clean_id(participant_id))
        if not isinstance(patch, Mapping):
            patch = {}

        if "name" in patch:
            name = clean_name(patch["name"])
            if name:
                record.name = name
        for key, attr in COUNTER_FIELDS.items():
            if key in patch:
                setattr(record, attr, non_negative(patch[key]))
        if "currentMiniGame" in patch:
            record.current_mini_game = coerce_label(patch["currentMiniGame"])
        if "currentMiniGameIndex" in patch:
            record.current_mini_game_index = safe_number(patch["currentMiniGameIndex"])

        record.updated_at = self._clock()
        return record

    def get(self, participant_id: Any) -> ParticipantRecord | None:
        return self._participants.get(clean_id(participant_id))

    def list(self) -> list[ParticipantRecord]:
        return list(self._participants.values())

    def load(self, rows: Iterable[Any]) -> int:
        loaded = 0
        loaded_at = self._clock()
        for row in rows:
            record = ParticipantRecord.from_document(row, default_updated_at=loaded_at)
            if record is None:
                continue
            self._participants[record.id] = record
            loaded += 1
        return loaded
