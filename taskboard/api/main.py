"""FastAPI application entrypoint and HTTP endpoints."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import structlog
from fastapi import FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from taskboard.core.errors import TaskNotFoundError, TaskValidationError
from taskboard.core.logging import configure_logging
from taskboard.core.service import TaskService
from taskboard.core.settings import get_settings
from taskboard.db.mongo import MongoTaskRepository
from taskboard.models.task_models import (
    FieldErrorOut,
    NotFoundResponse,
    Task,
    TaskPayload,
    ValidationErrorResponse,
)

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI):
    """FastAPI lifespan hook: configure logging and open the task store."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
    repository = MongoTaskRepository(settings.MONGODB_URL, settings.MONGODB_DB)
    application.state.repository = repository
    application.state.tasks = TaskService(repository)
    await repository.ping()
    await repository.ensure_schema()
    log.info("api_startup_complete")
    yield
    await repository.close()
    log.info("api_shutdown_complete")


app = FastAPI(title="Taskboard API", version="1.0.0", lifespan=lifespan)


_INVALID = {422: {"model": ValidationErrorResponse, "description": "Task failed validation"}}
_MISSING = {404: {"model": NotFoundResponse, "description": "Task not found"}}


def _service(request: Request) -> TaskService:
    return request.app.state.tasks


@app.exception_handler(TaskValidationError)
async def _validation_failed(_request: Request, exc: TaskValidationError) -> JSONResponse:
    body = ValidationErrorResponse(
        errors=[FieldErrorOut(field=e.field, kind=e.kind, message=e.message) for e in exc.errors]
    )
    return JSONResponse(status_code=422, content=body.model_dump())


@app.exception_handler(TaskNotFoundError)
async def _not_found(_request: Request, _exc: TaskNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content=NotFoundResponse().model_dump())


@app.middleware("http")
async def api_key_guard(request: Request, call_next):
    # Allow unauthenticated health and docs endpoints.
    if request.url.path in {"/health", "/docs", "/openapi.json", "/redoc"}:
        return await call_next(request)

    settings = get_settings()
    if settings.API_KEY and request.url.path.startswith("/v1/"):
        provided = request.headers.get(settings.API_KEY_HEADER)
        if provided != settings.API_KEY:
            return JSONResponse(status_code=401, content={"detail": "Unauthorized"})

    return await call_next(request)


@app.post("/v1/tasks", status_code=201, response_model=Task, responses=_INVALID)
async def create_task(payload: TaskPayload, request: Request) -> Task:
    """Validate and persist a new task."""
    return await _service(request).create_task(payload.model_dump(exclude_unset=True))


@app.get("/v1/tasks", response_model=list[Task], responses=_INVALID)
async def list_tasks(
    request: Request,
    status: str | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=500),
) -> list[Task]:
    return await _service(request).list_tasks(status=status, limit=limit)


@app.get("/v1/tasks/{task_id}", response_model=Task, responses=_MISSING)
async def get_task(task_id: str, request: Request) -> Task:
    return await _service(request).get_task(task_id)


@app.put("/v1/tasks/{task_id}", response_model=Task, responses={**_INVALID, **_MISSING})
async def replace_task(task_id: str, payload: TaskPayload, request: Request) -> Task:
    """Full update: omitted fields are cleared, then the record is re-validated."""
    return await _service(request).replace_task(task_id, payload.model_dump())


@app.patch("/v1/tasks/{task_id}", response_model=Task, responses={**_INVALID, **_MISSING})
async def update_task(task_id: str, payload: TaskPayload, request: Request) -> Task:
    """Partial update: only the submitted fields change."""
    return await _service(request).update_task(task_id, payload.model_dump(exclude_unset=True))


@app.delete("/v1/tasks/{task_id}", status_code=204, responses=_MISSING)
async def delete_task(task_id: str, request: Request) -> Response:
    await _service(request).delete_task(task_id)
    return Response(status_code=204)


@app.get("/health")
async def health(request: Request) -> dict[str, Any]:
    """Health check: verifies the task store answers a ping."""
    repository = request.app.state.repository
    store_ok = True
    store_error: str | None = None
    try:
        await repository.ping()
    except (PyMongoError, TimeoutError, OSError, ConnectionError, RuntimeError) as e:
        store_ok = False
        store_error = str(e)
        log.warning("health_store_ping_failed", error=store_error)

    overall = "healthy" if store_ok else "degraded"
    payload: dict[str, Any] = {
        "status": overall,
        "store": {"ok": store_ok, "error": store_error},
    }
    status_code = 200 if store_ok else 503
    return JSONResponse(status_code=status_code, content=payload)
