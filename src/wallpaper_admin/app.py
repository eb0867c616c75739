"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import Settings, get_settings
from .context import AppContext
from .errors import install_error_handlers
from .logging_config import RequestLoggingMiddleware, configure_logging
from .routes import api_router


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the admin API application."""

    settings = settings or get_settings()
    configure_logging(settings.log_level)
    context = AppContext.from_settings(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        await context.startup()
        try:
            yield
        finally:
            await context.shutdown()

    app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)
    app.state.context = context

    app.add_middleware(RequestLoggingMiddleware, logger=context.logger)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(api_router, prefix=settings.api_prefix)
    return app
