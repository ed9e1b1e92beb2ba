"""Application entrypoint for the FastAPI service."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import register_routers
from .core.settings import Settings, get_settings
from .services.orchestration import get_orchestrator

logger = logging.getLogger(__name__)


def create_application(settings: Settings | None = None) -> FastAPI:
    """Construct and configure the FastAPI application instance."""

    settings = settings or get_settings()
    application = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=_lifespan)
    _configure_cors(application, settings.allowed_origins)

    register_routers(application)
    return application


def _configure_cors(app: FastAPI, origins: Sequence[str] | None) -> None:
    allow_all = not origins
    allow_list = ["*"] if allow_all else list(origins or [])
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@asynccontextmanager
async def _lifespan(_: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger.info(
        "Application starting",
        extra={"environment": settings.environment, "gateway_mode": settings.gateway_mode.value},
    )
    yield
    if get_orchestrator.cache_info().currsize == 0:
        return
    close = getattr(get_orchestrator().gateway, "aclose", None)
    if close is not None:
        await close()


app = create_application()

__all__ = ("app", "create_application")
