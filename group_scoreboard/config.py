"""Process settings read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

DEFAULT_DATA_FILE = "group-scoreboard.json"
DEFAULT_TABLE_FILE = "group-scoreboard-table.html"
DEFAULT_REDIS_URL = "redis://localhost:6379/0"

StoreKind = Literal["file", "redis"]


def _optional(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name, default)
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass(frozen=True, slots=True)
class Settings:
    store: StoreKind = "file"
    data_file: str = DEFAULT_DATA_FILE
    table_file: str | None = DEFAULT_TABLE_FILE
    locale: str = "he"
    static_dir: str | None = None
    redis_url: str = DEFAULT_REDIS_URL
    redis_key: str = "group-scoreboard"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        store = os.getenv("SCOREBOARD_STORE", "file").strip().lower()
        if store not in ("file", "redis"):
            raise ValueError(f"SCOREBOARD_STORE must be 'file' or 'redis', got {store!r}")
        return cls(
            store=store,
            data_file=os.getenv("SCOREBOARD_DATA_FILE", DEFAULT_DATA_FILE),
            table_file=_optional("SCOREBOARD_TABLE_FILE", DEFAULT_TABLE_FILE),
            locale=os.getenv("SCOREBOARD_LOCALE", "he"),
            static_dir=_optional("SCOREBOARD_STATIC_DIR"),
            redis_url=os.getenv("REDIS_URL", DEFAULT_REDIS_URL),
            redis_key=os.getenv("SCOREBOARD_REDIS_KEY", "group-scoreboard"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
