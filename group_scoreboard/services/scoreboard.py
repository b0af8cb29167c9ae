"""Scoreboard engine: owns the registry, ranks it and keeps storage in sync."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from group_scoreboard.errors import PersistenceError
from group_scoreboard.logging_setup import get_logger
from group_scoreboard.services.normalize import now_iso
from group_scoreboard.services.ranking import NameCollator, rank_participants
from group_scoreboard.services.registry import ParticipantRecord, ParticipantRegistry
from group_scoreboard.services.table import TableFileWriter
from group_scoreboard.storage.snapshots import SnapshotStore

logger = get_logger(__name__)


@dataclass(slots=True)
class Snapshot:
    updated_at: str
    participants: list[ParticipantRecord]

    def to_document(self) -> dict[str, Any]:
        return {
            "updatedAt": self.updated_at,
            "participants": [p.to_document() for p in self.participants],
        }


@dataclass(slots=True)
class JoinResult:
    id: str
    participant: ParticipantRecord
    ranked_participants: list[ParticipantRecord]


@dataclass(slots=True)
class UpdateResult:
    participant: ParticipantRecord
    ranked_participants: list[ParticipantRecord]


class ScoreboardEngine:
    """Single owner of scoreboard state.

    Mutations run one at a time and each is followed by a full rewrite of
    the durable record. A failed write keeps the in-memory change, marks the
    engine dirty and re-raises; the next successful write clears the flag.
    """

    def __init__(
        self,
        store: SnapshotStore,
        registry: ParticipantRegistry | None = None,
        collator: NameCollator | None = None,
        table_writer: TableFileWriter | None = None,
        clock: Callable[[], str] = now_iso,
    ):
        self.store = store
        self.clock = clock
        self.registry = registry if registry is not None else ParticipantRegistry(clock=clock)
        self.collator = collator or NameCollator()
        self.table_writer = table_writer
        self.dirty = False
        self._lock = asyncio.Lock()

    def ranked(self) -> list[ParticipantRecord]:
        return rank_participants(self.registry.list(), self.collator)

    def snapshot(self) -> Snapshot:
        return Snapshot(updated_at=self.clock(), participants=self.ranked())

    async def start(self) -> int:
        """Load the durable record, then rewrite it in ranked order."""
        async with self._lock:
            loaded = 0
            try:
                document = await self.store.load()
            except PersistenceError as exc:
                logger.warning("Failed to load scoreboard data, starting empty: %s", exc)
                document = None

            if document is not None:
                rows = document.get("participants")
                if not isinstance(rows, list):
                    rows = []
                loaded = self.registry.load(rows)
                skipped = len(rows) - loaded
                if skipped:
                    logger.info("Skipped %d invalid participant rows from %r", skipped, self.store)
            logger.info("Loaded %d participants from %r", loaded, self.store)

            try:
                await self._persist()
            except PersistenceError as exc:
                logger.error("Initial scoreboard write failed: %s", exc)
            return loaded

    async def join(self, name: Any) -> JoinResult:
        async with self._lock:
            participant = self.registry.create(name)
            logger.info("Participant %s joined as %r", participant.id, participant.name)
            snapshot = await self._persist()
            return JoinResult(
                id=participant.id,
                participant=participant,
                ranked_participants=snapshot.participants,
            )

    async def update(self, participant_id: Any, stats: Any) -> UpdateResult:
        async with self._lock:
            participant = self.registry.apply_patch(participant_id, stats)
            snapshot = await self._persist()
            return UpdateResult(participant=participant, ranked_participants=snapshot.participants)

    def read(self) -> Snapshot:
        return self.snapshot()

    async def ping(self) -> bool:
        return await self.store.ping()

    async def close(self) -> None:
        await self.store.close()

    async def _persist(self) -> Snapshot:
        snapshot = self.snapshot()
        try:
            await self.store.save(snapshot.to_document())
        except PersistenceError:
            self.dirty = True
            logger.exception("Scoreboard write failed; in-memory state is ahead of storage")
            raise
        self.dirty = False

        if self.table_writer is not None:
            try:
                await self.table_writer.write(snapshot)
            except PersistenceError as exc:
                logger.warning("Scoreboard table not refreshed: %s", exc)
        return snapshot
