"""
Server entry point — FastAPI app setup and route configuration.
Builds the privacy metrics engine and session store once at startup
and exposes single-artifact assessment and batch upload sessions.
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncGenerator
from typing import Any

import dotenv
import fastapi
import uvicorn
from fastapi.middleware import cors
from starlette import responses

from opal import config, extraction
from opal.analysis import engine as engine_mod
from opal.models import dashboard
from opal.pipeline import batch, sessions
from opal.utils import errors, logger
from opal.utils.serialization import to_transport_dict

dotenv.load_dotenv()

log = logger.create_logger("Server")


@contextlib.asynccontextmanager
async def lifespan(app: fastapi.FastAPI) -> AsyncGenerator[None]:
    """Load the scoring tables and open the session store."""
    settings = config.get_settings()
    log.section("Opal Privacy Metrics Server Started")
    log.info("Environment", {"env": "production" if settings.is_production else "development"})

    app.state.engine = engine_mod.PrivacyMetricsEngine.from_data_dir(settings.tables_dir)
    app.state.store = sessions.SessionStore()
    app.state.extractor = extraction.MetadataSignalExtractor()
    yield
    log.info("Server stopping", {"sessions": len(app.state.store)})


app = fastapi.FastAPI(title="Opal Privacy Metrics Server", lifespan=lifespan)

# ============================================================================
# Middleware
# ============================================================================

app.add_middleware(
    cors.CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# Dependencies
# ============================================================================


def _engine(request: fastapi.Request) -> engine_mod.PrivacyMetricsEngine:
    return request.app.state.engine


def _store(request: fastapi.Request) -> sessions.SessionStore:
    return request.app.state.store


def _extractor(request: fastapi.Request) -> extraction.SignalExtractor:
    return request.app.state.extractor


def _open_session(store: sessions.SessionStore, body: dashboard.BatchRequest) -> dashboard.SessionRecord:
    """Validate the batch size and open a session for it."""
    try:
        settings = config.get_settings()
        batch.validate_batch(body.artifacts, settings.max_batch_files, settings.max_file_size)
    except errors.InvalidInput as exc:
        raise fastapi.HTTPException(status_code=422, detail=str(exc)) from exc
    return store.create([a.file_name for a in body.artifacts])


# ============================================================================
# API Routes
# ============================================================================


@app.get("/api/health")
async def health() -> dict[str, str]:
    """Liveness check."""
    return {"status": "ok"}


@app.post("/api/assess")
async def assess_endpoint(
    payload: dict[str, Any] = fastapi.Body(...),
    engine: engine_mod.PrivacyMetricsEngine = fastapi.Depends(_engine),
) -> dict[str, Any]:
    """Assess a single, already extracted artifact analysis."""
    try:
        result = engine.assess(payload)
    except errors.InvalidInput as exc:
        log.warn("Rejected assessment request", {"error": str(exc)})
        raise fastapi.HTTPException(status_code=422, detail=str(exc)) from exc
    return to_transport_dict(result)


@app.post("/api/sessions")
async def create_session(
    body: dashboard.BatchRequest,
    engine: engine_mod.PrivacyMetricsEngine = fastapi.Depends(_engine),
    store: sessions.SessionStore = fastapi.Depends(_store),
    extractor: extraction.SignalExtractor = fastapi.Depends(_extractor),
) -> dict[str, Any]:
    """Assess an upload batch and return the completed session."""
    record = _open_session(store, body)
    log.info("Incoming batch", {"sessionId": record.session_id, "files": len(body.artifacts)})

    logger.reset_timers()
    logger.start_log_file(record.session_id)
    try:
        completed = await batch.run_batch(
            engine,
            extractor,
            body.artifacts,
            store,
            record.session_id,
            config.get_settings().max_concurrency,
        )
    finally:
        logger.end_log_file()
    return to_transport_dict(completed)


@app.post("/api/sessions/stream")
async def stream_session(
    body: dashboard.BatchRequest,
    engine: engine_mod.PrivacyMetricsEngine = fastapi.Depends(_engine),
    store: sessions.SessionStore = fastapi.Depends(_store),
    extractor: extraction.SignalExtractor = fastapi.Depends(_extractor),
) -> responses.StreamingResponse:
    """
    Assess an upload batch with streaming progress via SSE.
    """
    record = _open_session(store, body)
    log.info("Incoming streamed batch", {"sessionId": record.session_id, "files": len(body.artifacts)})

    async def event_generator():
        logger.reset_timers()
        logger.start_log_file(record.session_id)
        try:
            async for event_str in batch.stream_batch(
                engine,
                extractor,
                body.artifacts,
                store,
                record.session_id,
                config.get_settings().max_concurrency,
            ):
                yield event_str
        finally:
            logger.end_log_file()

    return responses.StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "Access-Control-Allow-Origin": "*",
        },
    )


@app.get("/api/sessions/{session_id}")
async def get_session(
    session_id: str,
    store: sessions.SessionStore = fastapi.Depends(_store),
) -> dict[str, Any]:
    """Return the current state of a session."""
    try:
        record = store.get(session_id)
    except errors.SessionNotFound as exc:
        raise fastapi.HTTPException(status_code=404, detail=str(exc)) from exc
    return to_transport_dict(record)


@app.get("/api/sessions/{session_id}/dashboard")
async def get_dashboard(
    session_id: str,
    store: sessions.SessionStore = fastapi.Depends(_store),
) -> dict[str, Any]:
    """Return the dashboard summary of a completed session."""
    try:
        record = store.get(session_id)
    except errors.SessionNotFound as exc:
        raise fastapi.HTTPException(status_code=404, detail=str(exc)) from exc
    if record.summary is None:
        raise fastapi.HTTPException(
            status_code=409,
            detail=f"Session {session_id} has no dashboard (status: {record.status})",
        )
    return to_transport_dict(record.summary)


# ============================================================================
# Start Server
# ============================================================================


def run() -> None:
    """Entry point for running the server."""
    settings = config.get_settings()
    log.success(f"Server listening on {settings.host}:{settings.port}")

    uvicorn.run(
        "opal.main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )


if __name__ == "__main__":
    run()
