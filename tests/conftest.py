from __future__ import annotations

import itertools

import pytest
from fastapi.testclient import TestClient

from group_scoreboard.config import Settings
from group_scoreboard.main import create_app


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        data_file=str(tmp_path / "group-scoreboard.json"),
        table_file=str(tmp_path / "group-scoreboard-table.html"),
    )


@pytest.fixture()
def client(settings: Settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client, settings


@pytest.fixture()
def clock():
    """Deterministic timestamps, one second apart."""
    seconds = itertools.count()

    def tick() -> str:
        n = next(seconds)
        return f"2026-10-17T12:{n // 60:02d}:{n % 60:02d}.000Z"

    return tick
