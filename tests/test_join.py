from __future__ import annotations

import json
from pathlib import Path


def join(client, name):
    return client.post("/group-api/join", json={"name": name})


def test_join_same_name_twice_creates_two_rows(client):
    api, _ = client

    first = join(api, "Dana")
    second = join(api, "Dana")

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["id"] != second.json()["id"]

    rows = second.json()["participants"]
    assert [row["name"] for row in rows] == ["Dana", "Dana"]
    assert {row["id"] for row in rows} == {first.json()["id"], second.json()["id"]}


def test_join_returns_zeroed_participant(client):
    api, _ = client

    body = join(api, "  Noa  ").json()

    participant = body["participant"]
    assert participant["id"] == body["id"]
    assert participant["name"] == "Noa"
    assert participant["completedRounds"] == 0
    assert participant["totalMistakes"] == 0
    assert participant["bestRoundMs"] == 0
    assert participant["currentMiniGame"] == ""
    assert participant["updatedAt"].endswith("Z")


def test_join_truncates_long_names(client):
    api, _ = client

    body = join(api, "x" * 40).json()

    assert body["participant"]["name"] == "x" * 28


def test_join_rejects_blank_name(client):
    api, settings = client
    before = json.loads(Path(settings.data_file).read_text(encoding="utf-8"))

    response = join(api, "   ")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "name_required"
    assert api.get("/group-api/scoreboard").json()["participants"] == []
    after = json.loads(Path(settings.data_file).read_text(encoding="utf-8"))
    assert after == before


def test_join_rejects_missing_name(client):
    api, _ = client

    response = api.post("/group-api/join", json={})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "name_required"


def test_join_without_body_is_name_required(client):
    api, _ = client

    response = api.post("/group-api/join")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "name_required"


def test_join_with_non_object_body_is_name_required(client):
    api, _ = client

    response = api.post("/group-api/join", json=["Dana"])

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "name_required"


def test_join_rejects_oversized_body(client):
    api, _ = client

    response = api.post("/group-api/join", json={"name": "Dana", "padding": "x" * 1_000_001})

    assert response.status_code == 413
    assert response.json()["error"]["code"] == "payload_too_large"
    assert api.get("/group-api/scoreboard").json()["participants"] == []


def test_join_rejects_malformed_body(client):
    api, _ = client

    response = api.post(
        "/group-api/join",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "invalid_json"


def test_join_writes_durable_record_and_table(client):
    api, settings = client

    participant_id = join(api, "Dana").json()["id"]

    document = json.loads(Path(settings.data_file).read_text(encoding="utf-8"))
    assert [row["id"] for row in document["participants"]] == [participant_id]
    assert document["updatedAt"].endswith("Z")
    assert "Dana" in Path(settings.table_file).read_text(encoding="utf-8")
