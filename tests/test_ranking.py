from __future__ import annotations

import random

from group_scoreboard.services.ranking import NameCollator, rank_participants
from group_scoreboard.services.registry import ParticipantRecord


def record(name: str, rounds=0, mistakes=0, participant_id: str | None = None) -> ParticipantRecord:
    return ParticipantRecord(
        id=participant_id or f"id-{name}",
        name=name,
        updated_at="2026-10-17T12:00:00.000Z",
        completed_rounds=rounds,
        total_mistakes=mistakes,
    )


def names(records) -> list[str]:
    return [r.name for r in records]


def test_fewer_mistakes_wins_round_tie():
    a = record("A", rounds=3, mistakes=2)
    b = record("B", rounds=3, mistakes=1)

    assert names(rank_participants([a, b])) == ["B", "A"]


def test_more_rounds_beats_fewer_mistakes():
    leader = record("Leader", rounds=4, mistakes=9)
    chaser = record("Chaser", rounds=3, mistakes=0)

    assert names(rank_participants([chaser, leader])) == ["Leader", "Chaser"]


def test_name_breaks_full_numeric_tie():
    rows = [record("Charlie"), record("alice"), record("Bob")]

    assert names(rank_participants(rows, NameCollator("en"))) == ["alice", "Bob", "Charlie"]


def test_non_finite_counters_rank_as_zero():
    broken = record("Broken", rounds=float("nan"), mistakes=float("inf"))
    zero = record("Zero")
    one = record("One", rounds=1)

    assert names(rank_participants([broken, zero, one], NameCollator("en"))) == ["One", "Broken", "Zero"]


def test_identical_rows_fall_back_to_id():
    rows = [record("Dana", participant_id="b"), record("Dana", participant_id="a")]

    assert [r.id for r in rank_participants(rows)] == ["a", "b"]


def test_ranking_is_idempotent_and_input_order_independent():
    rows = [
        record(f"P{i}", rounds=i % 3, mistakes=i % 4, participant_id=f"id-{i}")
        for i in range(20)
    ]
    ranked = rank_participants(rows)
    shuffled = rows[:]
    random.Random(7).shuffle(shuffled)

    assert rank_participants(ranked) == ranked
    assert rank_participants(shuffled) == ranked


def test_hebrew_names_sort_alphabetically():
    collator = NameCollator("he")

    assert names(rank_participants([record("בן"), record("אביב")], collator)) == ["אביב", "בן"]


def test_hebrew_locale_puts_hebrew_before_latin():
    rows = [record("Zoe"), record("אביב"), record("Adam")]

    assert names(rank_participants(rows, NameCollator("he"))) == ["אביב", "Adam", "Zoe"]


def test_lowercase_sorts_before_uppercase_on_tie():
    rows = [record("Dana", participant_id="a"), record("dana", participant_id="b")]

    assert names(rank_participants(rows, NameCollator("he"))) == ["dana", "Dana"]


def test_punctuation_sorts_before_letters():
    rows = [record("a"), record("{x"), record("~y")]

    ranked = names(rank_participants(rows, NameCollator("he")))

    assert ranked[-1] == "a"


def test_accents_sort_with_base_letter():
    collator = NameCollator("fr")

    assert names(rank_participants([record("Zoe"), record("Élan")], collator)) == ["Élan", "Zoe"]
