"""FastAPI application wiring for routes, error handlers, and lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from group_scoreboard.api.errors import APIError
from group_scoreboard.api.routes import probes, router
from group_scoreboard.config import Settings
from group_scoreboard.logging_setup import configure_logging, get_logger
from group_scoreboard.models.schemas import ErrorBody, ErrorResponse
from group_scoreboard.services.ranking import NameCollator
from group_scoreboard.services.scoreboard import ScoreboardEngine
from group_scoreboard.services.table import TableFileWriter
from group_scoreboard.storage.redis import create_redis_store
from group_scoreboard.storage.snapshots import JsonFileSnapshotStore, SnapshotStore

logger = get_logger(__name__)


def create_store(settings: Settings) -> SnapshotStore:
    if settings.store == "redis":
        return create_redis_store(settings)
    return JsonFileSnapshotStore(settings.data_file)


def create_engine(settings: Settings) -> ScoreboardEngine:
    table_writer = TableFileWriter(settings.table_file) if settings.table_file else None
    return ScoreboardEngine(
        create_store(settings),
        collator=NameCollator(settings.locale),
        table_writer=table_writer,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def app_lifespan(app: FastAPI):
        engine = create_engine(settings)
        app.state.scoreboard = engine
        await engine.start()
        logger.info("Scoreboard ready using %r", engine.store)
        try:
            yield
        finally:
            await engine.close()

    app = FastAPI(title="Group Scoreboard API", version="1.0.0", lifespan=app_lifespan)

    @app.exception_handler(APIError)
    async def api_error_handler(_: Request, exc: APIError) -> JSONResponse:
        payload = ErrorResponse(
            error=ErrorBody(code=exc.code, message=exc.message, details=exc.details),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=payload.model_dump(exclude_none=True),
            headers={"Cache-Control": "no-store"},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        payload = ErrorResponse(
            error=ErrorBody(
                code="VALIDATION_ERROR",
                message="Request validation failed",
                details={"errors": exc.errors()},
            ),
        )
        return JSONResponse(status_code=400, content=payload.model_dump(exclude_none=True))

    app.include_router(router)
    app.include_router(probes)
    if settings.static_dir:
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
    return app


app = create_app()
