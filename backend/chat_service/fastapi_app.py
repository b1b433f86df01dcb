"""
FastAPI Application Factory.
Creates and configures the FastAPI application with all routers, middleware, and DI.

Endpoints:
- conversations, messages, notifications (REST)
- /ws (realtime)
- /health
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from chat_service.config.logging_config import correlation_id_var, setup_logging
from chat_service.config.settings import Config
from chat_service.domain.exceptions import (
    ConflictError,
    DomainError,
    ExternalDependencyError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from chat_service.presentation.api import (
    conversations_router,
    messages_router,
    notifications_router,
    realtime_router,
)
from chat_service.setup.ioc.container import create_container

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: 400,
    ForbiddenError: 403,
    NotFoundError: 404,
    ConflictError: 409,
    ExternalDependencyError: 503,
}


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to extract and set correlation ID from request headers."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", "-")

        # Set in contextvars (propagates to async tasks and logging)
        correlation_id_var.set(correlation_id)

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id

        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: container already set up by create_fastapi_app.
    Shutdown: close the DI container (disconnects Prisma/Redis).
    """
    logger.info("Chat service started. DI container initialized.")
    yield
    await app.state.dishka_container.close()
    logger.info("Chat service shutdown. DI container closed.")


def create_fastapi_app(container: Optional[AsyncContainer] = None) -> FastAPI:
    """
    Application factory for creating FastAPI app.

    Each app gets its own container unless one is passed in, so in-memory
    state and presence are never shared between app instances.
    """
    setup_logging(Config.LOG_LEVEL, Config.LOG_PATH)

    app = FastAPI(
        title="Chat Service API",
        description="Conversations, ordered message delivery, unread counters and realtime fan-out",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Dishka adds middleware, so it must be set up before the app starts
    setup_dishka(container or create_container(), app)

    app.add_middleware(CorrelationIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DomainError)
    async def domain_exception_handler(request: Request, exc: DomainError):
        status_code = next(
            (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 500
        )
        if status_code >= 500:
            logger.error(f"[{type(exc).__name__}] {exc.message}")
        else:
            logger.info(f"[{type(exc).__name__}] {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        logger.info(f"[VALIDATION ERROR] {errors}")
        return JSONResponse(
            status_code=400,
            content={"error": "Validation error", "details": jsonable_errors(errors)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"[GLOBAL ERROR] {type(exc).__name__}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy"}

    app.include_router(conversations_router)
    app.include_router(messages_router)
    app.include_router(notifications_router)
    app.include_router(realtime_router)

    return app


def jsonable_errors(errors) -> list[dict]:
    return [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in errors
    ]
