from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .logging_setup import setup_logging
from .persistence import build_store
from .routers import tasks as tasks_router
from .settings import Settings, get_settings
from .storage import get_storage
from .store import TaskListStore

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "tasks",
        "description": "Add, edit, complete, filter and delete tasks of the to-do list.",
    },
]


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Report malformed task requests, such as an unknown filter or a non-integer
    index, as a 422 with an error/message/detail body.
    """
    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": exc.errors(),
        },
    )


# PUBLIC_INTERFACE
def create_app(store: Optional[TaskListStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application around a single task list store.

    Args:
        store: Store to serve. When omitted it is rehydrated from the storage
            backend selected by settings.
        settings: Application settings; read from the environment when omitted.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    if store is None:
        store = build_store(get_storage(settings), settings.storage_key)

    app = FastAPI(
        title="Task List",
        description="Single-user to-do list with persistent task state.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )
    app.state.store = store
    app.state.settings = settings

    # CORS_ALLOW_ORIGINS from env, with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "backend": settings.persistence_backend}

    app.include_router(tasks_router.router)
    logger.info("app ready backend=%s key=%s", settings.persistence_backend, settings.storage_key)
    return app


app = create_app()
