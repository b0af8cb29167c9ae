"""Deterministic ordering of participants for the scoreboard view."""

from __future__ import annotations

from collections.abc import Iterable

import icu

from group_scoreboard.services.normalize import safe_number
from group_scoreboard.services.registry import ParticipantRecord

DEFAULT_LOCALE = "he"


class NameCollator:
    """Builds locale-aware sort keys for display names.

    Keys come from the ICU collator for ``locale``, so script order, case
    order and punctuation follow that locale's CLDR rules (for ``he``:
    Hebrew before Latin, lowercase before uppercase on a tie).
    """

    def __init__(self, locale: str = DEFAULT_LOCALE):
        self.locale = locale or DEFAULT_LOCALE
        self._collator = icu.Collator.createInstance(icu.Locale(self.locale))

    def key(self, name: str) -> bytes:
        return self._collator.getSortKey(str(name or ""))


def ranking_key(record: ParticipantRecord, collator: NameCollator) -> tuple:
    # The trailing id keeps the order total when two rows share a name.
    return (
        -safe_number(record.completed_rounds),
        safe_number(record.total_mistakes),
        collator.key(record.name),
        record.id,
    )


def rank_participants(
    records: Iterable[ParticipantRecord],
    collator: NameCollator | None = None,
) -> list[ParticipantRecord]:
    collator = collator or NameCollator()
    return sorted(records, key=lambda record: ranking_key(record, collator))
