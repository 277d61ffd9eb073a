from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from discussion_service.api.middleware.correlation_id import CorrelationIdMiddleware
from discussion_service.api.middleware.metrics import RequestTimingMiddleware
from discussion_service.api.v1.routers import health, messages, ws
from discussion_service.application.exceptions import (
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from discussion_service.application.uow import UoWFactory
from discussion_service.config import settings
from discussion_service.infrastructure.db.session import engine
from discussion_service.infrastructure.db.uow import open_uow
from discussion_service.infrastructure.ws.manager import ConnectionManager
from discussion_service.services.audio_relay import AudioRelay
from discussion_service.services.chat_gateway import ChatGateway

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    logger.info(
        "Discussion service up: chat + audio signaling (audio rooms capped at %d)",
        settings.AUDIO_ROOM_MAX_PARTICIPANTS,
    )

    yield

    await engine.dispose()
    logger.info("Database engine disposed")


def create_app(uow_factory: UoWFactory | None = None) -> FastAPI:
    """Build the app with its own real-time state.

    Room registries live on ``app.state``, one set per app instance, so every
    test can build an isolated app.
    """
    app = FastAPI(
        title="ForumX Discussion Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    factory = uow_factory or open_uow
    app.state.chat_connections = ConnectionManager("chat")
    app.state.audio_connections = ConnectionManager("audio")
    app.state.chat_gateway = ChatGateway(
        app.state.chat_connections,
        factory,
        max_length=settings.MESSAGE_MAX_LENGTH,
    )
    app.state.audio_relay = AudioRelay(
        app.state.audio_connections,
        factory,
        max_participants=settings.AUDIO_ROOM_MAX_PARTICIPANTS,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(messages.router)
    app.include_router(ws.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ForbiddenError)
    async def _forbidden(_req: Request, exc: ForbiddenError) -> JSONResponse:
        return JSONResponse(status_code=403, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})

    @app.exception_handler(AuthenticationError)
    async def _unauthorized(_req: Request, exc: AuthenticationError) -> JSONResponse:
        return JSONResponse(status_code=401, content={"detail": exc.detail})
