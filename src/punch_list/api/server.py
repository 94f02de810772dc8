# src/punch_list/api/server.py

"""
Task API: FastAPI application over a TaskRepo.

Launch:
    punch-list serve                # via CLI
    python -m punch_list.api.server # direct

Endpoints:
    GET    /                  -> {"text": greeting}
    GET    /tasks             -> pending tasks (JSON array)
    GET    /tasks/complete    -> completed tasks (JSON array, id order)
    POST   /tasks             -> create        {"task"}
    PUT    /tasks             -> edit text     {"id", "task"}
    PUT    /tasks/complete    -> set complete  {"id", "complete"}
    DELETE /tasks/delete/{id} -> delete one
    DELETE /tasks/clear       -> delete all completed

Mutations always answer with a fixed plain-text message, whether or not the
targeted row existed. Failures use one JSON envelope:
    {"error": {"code": "...", "message": "..."}}
"""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import FastAPI, Path, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import AfterValidator, BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.ports import TaskRepo
from ..tasks.task_store import TaskStoreError

logger = logging.getLogger(__name__)

MSG_ADDED = "Task added successfully!"
MSG_EDITED = "Task edited successfully!"
MSG_COMPLETED = "Task complete."
MSG_DELETED = "Successfully deleted."
MSG_CLEARED = "Completed tasks cleared."


# SQLite INTEGER is a signed 64-bit value; larger ids can never match a row.
SQLITE_INT_MIN = -(2**63)
SQLITE_INT_MAX = 2**63 - 1


def _encodable(text: str) -> str:
    # Lone surrogates decode from JSON escapes but cannot be stored as UTF-8.
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValueError("task text is not valid unicode") from e
    return text


TaskId = Annotated[int, Field(ge=SQLITE_INT_MIN, le=SQLITE_INT_MAX)]
TaskText = Annotated[str, AfterValidator(_encodable)]


# ─────────────────────────────────────────────────────────────
#  Request models
# ─────────────────────────────────────────────────────────────

class NewTask(BaseModel):
    task: TaskText


class EditTask(BaseModel):
    id: TaskId
    task: TaskText


class CompleteTask(BaseModel):
    id: TaskId
    complete: bool


def error_body(code: str, message: str) -> dict[str, Any]:
    return {"error": {"code": code, "message": message}}


def _store(request: Request) -> TaskRepo:
    return request.app.state.store


# ─────────────────────────────────────────────────────────────
#  App factory
# ─────────────────────────────────────────────────────────────

def create_app(store: TaskRepo, settings: Any = None) -> FastAPI:
    """
    Build the API around an explicit store handle.

    `settings` may be the real Settings or any object exposing
    app_name / greeting / cors_origins; missing attributes fall back to defaults.
    """
    app_name = str(getattr(settings, "app_name", "punch-list"))
    greeting = str(getattr(settings, "greeting", "Hello, Tasks."))
    cors_origins = list(getattr(settings, "cors_origins", None) or ["*"])

    app = FastAPI(title=app_name, version="2.0.0")
    app.state.store = store
    app.state.greeting = greeting

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(TaskStoreError)
    async def _on_storage_fault(request: Request, exc: TaskStoreError) -> JSONResponse:
        logger.error(
            "Storage fault on %s %s: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content=error_body("storage_error", str(exc)))

    @app.exception_handler(RequestValidationError)
    async def _on_bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
            problems.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else str(err.get("msg")))
        message = "; ".join(problems) or "Malformed request."
        logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
        return JSONResponse(status_code=422, content=error_body("invalid_request", message))

    @app.exception_handler(StarletteHTTPException)
    async def _on_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        code = "not_found" if exc.status_code == 404 else "http_error"
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(code, str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def _on_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content=error_body("internal_error", "Internal server error."),
        )

    @app.get("/")
    def index(request: Request) -> dict[str, str]:
        return {"text": request.app.state.greeting}

    @app.get("/tasks")
    def list_pending(request: Request) -> JSONResponse:
        tasks = _store(request).list_by_completion(False)
        return JSONResponse([t.to_json() for t in tasks])

    @app.get("/tasks/complete")
    def list_completed(request: Request) -> JSONResponse:
        tasks = _store(request).list_by_completion(True)
        return JSONResponse([t.to_json() for t in tasks])

    @app.post("/tasks", response_class=PlainTextResponse)
    def add_task(body: NewTask, request: Request) -> str:
        task = _store(request).create_task(body.task)
        logger.debug("POST /tasks created id=%s", task.id)
        return MSG_ADDED

    @app.put("/tasks", response_class=PlainTextResponse)
    def edit_task(body: EditTask, request: Request) -> str:
        if not _store(request).update_text(body.id, body.task):
            logger.warning("PUT /tasks: no task with id=%s, nothing edited", body.id)
        return MSG_EDITED

    @app.put("/tasks/complete", response_class=PlainTextResponse)
    def complete_task(body: CompleteTask, request: Request) -> str:
        if not _store(request).update_completion(body.id, body.complete):
            logger.warning("PUT /tasks/complete: no task with id=%s", body.id)
        else:
            logger.debug("Task id=%s complete=%s", body.id, body.complete)
        return MSG_COMPLETED

    @app.delete("/tasks/delete/{task_id}", response_class=PlainTextResponse)
    def delete_task(
        task_id: Annotated[int, Path(ge=SQLITE_INT_MIN, le=SQLITE_INT_MAX)],
        request: Request,
    ) -> str:
        if not _store(request).delete_by_id(task_id):
            logger.warning("DELETE /tasks/delete/%s: no such task", task_id)
        return MSG_DELETED

    @app.delete("/tasks/clear", response_class=PlainTextResponse)
    def clear_completed(request: Request) -> str:
        removed = _store(request).delete_where_completed()
        logger.info("Cleared %d completed task(s)", removed)
        return MSG_CLEARED

    return app


def run_server(settings: Any = None) -> None:
    """Build the store (schema sync happens here) and serve until interrupted."""
    import uvicorn

    from ..cli.bootstrap import create_store
    from ..config import get_settings

    if settings is None:
        settings = get_settings()

    store = create_store(settings)
    app = create_app(store, settings)

    logger.info("Server is running on %s:%s.", settings.host, settings.port)
    # log_config=None keeps the handlers installed by setup_logging.
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    from ..cli.main import main

    main(["serve"])
