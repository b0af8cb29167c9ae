"""Durable storage for the ranked scoreboard document.

Every backend stores the whole document as one unit and overwrites it on
each save; there is no append log and no partial merge.
"""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from redis.asyncio import Redis
from redis.exceptions import RedisError

from group_scoreboard.errors import PersistenceError

DEFAULT_REDIS_KEY = "group-scoreboard"


def encode_document(document: dict[str, Any]) -> str:
    return json.dumps(document, ensure_ascii=False, indent=2)


def decode_document(raw: str | bytes | None, source: str) -> dict[str, Any] | None:
    """Parse stored content; blank content means "nothing stored yet"."""
    if raw is None:
        return None
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    if not raw.strip():
        return None
    try:
        document = json.loads(raw)
    except ValueError as exc:
        raise PersistenceError(f"Unparsable scoreboard data in {source}: {exc}") from exc
    if not isinstance(document, dict):
        raise PersistenceError(f"Scoreboard data in {source} is not a JSON object")
    return document


class SnapshotStore(Protocol):
    async def load(self) -> dict[str, Any] | None: ...

    async def save(self, document: dict[str, Any]) -> None: ...

    async def ping(self) -> bool: ...

    async def close(self) -> None: ...


class JsonFileSnapshotStore:
    def __init__(self, path: str | os.PathLike[str]):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"JsonFileSnapshotStore({str(self.path)!r})"

    async def load(self) -> dict[str, Any] | None:
        return await asyncio.to_thread(self._load_sync)

    async def save(self, document: dict[str, Any]) -> None:
        await asyncio.to_thread(self._save_sync, encode_document(document))

    async def ping(self) -> bool:
        directory = self.path.parent
        return directory.is_dir() and os.access(directory, os.W_OK)

    async def close(self) -> None:
        return None

    def _load_sync(self) -> dict[str, Any] | None:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Cannot read {self.path}: {exc}") from exc
        return decode_document(raw, str(self.path))

    def _save_sync(self, payload: str) -> None:
        # Write next to the target and swap it in so readers never see half a file.
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"Cannot write {self.path}: {exc}") from exc


class RedisSnapshotStore:
    def __init__(self, redis_client: Redis, key: str = DEFAULT_REDIS_KEY):
        self.redis = redis_client
        self.key = key

    def __repr__(self) -> str:
        return f"RedisSnapshotStore(key={self.key!r})"

    async def load(self) -> dict[str, Any] | None:
        try:
            raw = await self.redis.get(self.key)
        except RedisError as exc:
            raise PersistenceError(f"Cannot read redis key {self.key}: {exc}") from exc
        return decode_document(raw, f"redis key {self.key}")

    async def save(self, document: dict[str, Any]) -> None:
        try:
            await self.redis.set(self.key, encode_document(document))
        except RedisError as exc:
            raise PersistenceError(f"Cannot write redis key {self.key}: {exc}") from exc

    async def ping(self) -> bool:
        response = await self.redis.ping()
        return bool(response)

    async def close(self) -> None:
        await self.redis.aclose()
