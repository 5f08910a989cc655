"""
FastAPI application: REST API for the Forge control surface.

Endpoints:
  GET    /health                       : Health check
  GET    /queue                        : Full snapshot (features, counts, engine, logs)
  POST   /queue/compact                : Respace pending priorities
  GET    /features                     : Features in queue order (optional ?status=)
  POST   /features                     : Add a feature from NAME/CATEGORY/DESCRIPTION text
  POST   /features/{id}/skip|retry|complete|requeue
  POST   /features/{id}/move-top|move-up
  DELETE /features/{id}                : Delete a feature
  GET    /engine                       : Engine config + derived status
  POST   /engine/start | /engine/pause : Toggle engine_paused
  PATCH  /engine/config                : Update any subset of config keys
  GET    /logs                         : Recent worker log entries
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

import config
from features.engine import EngineControl, derive_status
from features.errors import (
    FeatureNotFound,
    ForgeError,
    PreconditionError,
    StoreError,
    ValidationError,
)
from features.queue import FeatureStatus, InsertPosition, LogEntry, QueueService, load_snapshot
from features.queue.snapshot import feature_dict
from features.store import LOGS, Store, open_store

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger(__name__)

store: Store | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global store
    store = open_store(config.DATABASE_URL)
    log.info("Forge API using %s store", store.name)
    yield
    close = getattr(store, "close", None)
    if close:
        close()


app = FastAPI(
    title="Forge Control",
    description="Control surface for the Forge autonomous build queue",
    version="1.0.0",
    lifespan=lifespan,
)


def get_store() -> Store:
    if store is None:
        raise StoreError("Store not initialized")
    return store


def get_queue(s: Store = Depends(get_store)) -> QueueService:
    return QueueService(s)


def get_engine(s: Store = Depends(get_store)) -> EngineControl:
    return EngineControl(s)


# ── Errors ────────────────────────────────────────────────────────────

_STATUS_CODES: dict[type[ForgeError], int] = {
    ValidationError: 400,
    FeatureNotFound: 404,
    PreconditionError: 409,
    StoreError: 503,
}


@app.exception_handler(ForgeError)
async def forge_error_handler(request: Request, exc: ForgeError):
    code = next(
        (c for t, c in _STATUS_CODES.items() if isinstance(exc, t)),
        500,
    )
    if code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc)
    body: dict[str, Any] = {"detail": exc.message, "error": type(exc).__name__}
    if isinstance(exc, PreconditionError):
        body.update(feature_id=exc.feature_id, action=exc.action, status=exc.status)
    return JSONResponse(status_code=code, content=body)


# ── Request models ────────────────────────────────────────────────────

class FeatureCreateRequest(BaseModel):
    text: str = Field(..., description="NAME:/CATEGORY:/DESCRIPTION: header, '---', instructions")
    position: InsertPosition = InsertPosition.BACK


class EngineConfigUpdate(BaseModel):
    auto_approve: bool | None = None
    skip_on_error: bool | None = None
    engine_paused: bool | None = None
    notification_email: str | None = None


# ── Health ────────────────────────────────────────────────────────────

@app.get("/health")
def health(s: Store = Depends(get_store)):
    """Liveness plus the active backend; 503 until the store is open."""
    return {
        "status": "ok",
        "service": "forge-control",
        "store": s.name,
    }


# ── Queue ─────────────────────────────────────────────────────────────

@app.get("/queue")
def get_snapshot(s: Store = Depends(get_store)):
    """Everything a dashboard needs for one render."""
    return load_snapshot(s).to_dict()


@app.post("/queue/compact")
def compact_queue(queue: QueueService = Depends(get_queue)):
    return {"rewritten": queue.compact()}


# ── Features ──────────────────────────────────────────────────────────

@app.get("/features")
def list_features(status: FeatureStatus | None = None, queue: QueueService = Depends(get_queue)):
    view = queue.view()
    features = view.with_status(status) if status else view.ordered()
    return {"features": [feature_dict(f) for f in features], "count": len(features)}


@app.post("/features", status_code=201)
def create_feature(req: FeatureCreateRequest, queue: QueueService = Depends(get_queue)):
    """Add a feature to the back of the queue, or the front for "start now"."""
    return feature_dict(queue.add_text(req.text, req.position))


@app.post("/features/{feature_id}/skip")
def skip_feature(feature_id: str, queue: QueueService = Depends(get_queue)):
    return feature_dict(queue.skip(feature_id))


@app.post("/features/{feature_id}/retry")
def retry_feature(feature_id: str, queue: QueueService = Depends(get_queue)):
    return feature_dict(queue.retry(feature_id))


@app.post("/features/{feature_id}/complete")
def complete_feature(feature_id: str, queue: QueueService = Depends(get_queue)):
    return feature_dict(queue.complete(feature_id))


@app.post("/features/{feature_id}/requeue")
def requeue_feature(feature_id: str, queue: QueueService = Depends(get_queue)):
    return feature_dict(queue.requeue(feature_id))


@app.post("/features/{feature_id}/move-top")
def move_feature_to_top(feature_id: str, queue: QueueService = Depends(get_queue)):
    return feature_dict(queue.move_to_top(feature_id))


@app.post("/features/{feature_id}/move-up")
def move_feature_up(feature_id: str, queue: QueueService = Depends(get_queue)):
    return feature_dict(queue.move_up(feature_id))


@app.delete("/features/{feature_id}", status_code=204)
def delete_feature(feature_id: str, force: bool = False, queue: QueueService = Depends(get_queue)):
    queue.delete(feature_id, force=force)


# ── Engine ────────────────────────────────────────────────────────────

@app.get("/engine")
def get_engine_state(engine: EngineControl = Depends(get_engine), queue: QueueService = Depends(get_queue)):
    cfg = engine.load()
    status = derive_status(cfg.engine_paused, queue.view().is_building)
    return {"status": status.value, "config": cfg.to_dict()}


@app.post("/engine/start")
def start_engine(engine: EngineControl = Depends(get_engine), queue: QueueService = Depends(get_queue)):
    engine.resume()
    return get_engine_state(engine, queue)


@app.post("/engine/pause")
def pause_engine(engine: EngineControl = Depends(get_engine), queue: QueueService = Depends(get_queue)):
    """Ask the worker to stop claiming work; the current build is left to finish."""
    engine.pause()
    return get_engine_state(engine, queue)


@app.patch("/engine/config")
def update_engine_config(
    req: EngineConfigUpdate,
    engine: EngineControl = Depends(get_engine),
    queue: QueueService = Depends(get_queue),
):
    values = req.model_dump(exclude_none=True)
    if not values:
        raise ValidationError("No config values supplied")
    engine.update(values)
    return get_engine_state(engine, queue)


# ── Logs ──────────────────────────────────────────────────────────────

@app.get("/logs")
def list_logs(limit: int = Query(config.LOG_LIMIT, ge=1, le=500), s: Store = Depends(get_store)):
    rows = s.select_all(LOGS, order_by="-created_at", limit=limit)
    return {"logs": [LogEntry.from_row(r).to_dict() for r in rows]}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT)
