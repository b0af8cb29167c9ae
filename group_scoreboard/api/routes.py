"""HTTP route handlers for joining, updating and reading the group scoreboard."""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import HTMLResponse

from group_scoreboard.api.errors import APIError
from group_scoreboard.errors import ScoreboardError
from group_scoreboard.models.schemas import (
    HealthResponse,
    JoinRequest,
    JoinResponse,
    Participant,
    ReadyResponse,
    ScoreboardResponse,
    UpdateRequest,
    UpdateResponse,
)
from group_scoreboard.services.scoreboard import ScoreboardEngine
from group_scoreboard.services.table import render_table

router = APIRouter(prefix="/group-api")
probes = APIRouter()

NO_STORE = {"Cache-Control": "no-store"}
MAX_BODY_BYTES = 1_000_000


def get_engine(request: Request) -> ScoreboardEngine:
    return request.app.state.scoreboard


async def read_json_body(request: Request) -> dict[str, Any]:
    """Read a JSON object body; a missing or non-object body reads as ``{}``."""
    too_large = APIError(
        code="payload_too_large",
        message=f"Request body exceeds {MAX_BODY_BYTES} bytes",
        status_code=413,
    )
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > MAX_BODY_BYTES:
        raise too_large

    raw = bytearray()
    async for chunk in request.stream():
        raw.extend(chunk)
        if len(raw) > MAX_BODY_BYTES:
            raise too_large
    if not raw.strip():
        return {}

    try:
        body = json.loads(raw)
    except ValueError as exc:
        raise APIError(
            code="invalid_json",
            message="Request body is not valid JSON",
            status_code=400,
        ) from exc
    return body if isinstance(body, dict) else {}


def _participants(records) -> list[Participant]:
    return [Participant.from_record(record) for record in records]


@router.get("/scoreboard", response_model=ScoreboardResponse)
async def read_scoreboard(
    response: Response,
    engine: ScoreboardEngine = Depends(get_engine),
) -> ScoreboardResponse:
    response.headers.update(NO_STORE)
    snapshot = engine.read()
    return ScoreboardResponse(
        updated_at=snapshot.updated_at,
        participants=_participants(snapshot.participants),
    )


@router.post("/join", response_model=JoinResponse)
async def join(
    response: Response,
    body: dict[str, Any] = Depends(read_json_body),
    engine: ScoreboardEngine = Depends(get_engine),
) -> JoinResponse:
    payload = JoinRequest.model_validate(body)
    try:
        result = await engine.join(payload.name)
    except ScoreboardError as exc:
        raise APIError.from_scoreboard_error(exc) from exc

    response.headers.update(NO_STORE)
    return JoinResponse(
        id=result.id,
        participant=Participant.from_record(result.participant),
        participants=_participants(result.ranked_participants),
    )


@router.post("/update", response_model=UpdateResponse)
async def update(
    response: Response,
    body: dict[str, Any] = Depends(read_json_body),
    engine: ScoreboardEngine = Depends(get_engine),
) -> UpdateResponse:
    payload = UpdateRequest.model_validate(body)
    try:
        result = await engine.update(payload.id, payload.stats)
    except ScoreboardError as exc:
        raise APIError.from_scoreboard_error(exc) from exc

    response.headers.update(NO_STORE)
    return UpdateResponse(
        participant=Participant.from_record(result.participant),
        participants=_participants(result.ranked_participants),
    )


@router.get("/table", response_class=HTMLResponse)
async def read_table(engine: ScoreboardEngine = Depends(get_engine)) -> HTMLResponse:
    return HTMLResponse(render_table(engine.read()), headers=NO_STORE)


# These probes are intended for infrastructure and do not need to appear in API docs.
@probes.get("/healthz", response_model=HealthResponse, include_in_schema=False)
async def healthz() -> HealthResponse:
    return HealthResponse(status="ok")


@probes.get("/readyz", response_model=ReadyResponse, include_in_schema=False)
async def readyz(engine: ScoreboardEngine = Depends(get_engine)) -> ReadyResponse:
    try:
        is_ready = await engine.ping()
    except Exception as exc:
        raise APIError(
            code="STORE_UNAVAILABLE",
            message="Scoreboard storage readiness check failed",
            status_code=503,
        ) from exc

    if not is_ready:
        raise APIError(
            code="STORE_UNAVAILABLE",
            message="Scoreboard storage readiness check failed",
            status_code=503,
        )
    if engine.dirty:
        raise APIError(
            code="PERSISTENCE_DIRTY",
            message="Latest scoreboard changes have not been written to storage",
            status_code=503,
        )
    return ReadyResponse(status="ok")
