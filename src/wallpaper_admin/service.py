"""Factory for the public wallpaper service.

Only a connectivity check is served for now; anything else falls through to
the shared ``404 not found!`` envelope.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import Settings, get_settings
from .errors import install_error_handlers
from .logging_config import RequestLoggingMiddleware, configure_logging
from .routes.service import router


def create_service_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title=f"{settings.app_name} Service", version=__version__)
    app.add_middleware(RequestLoggingMiddleware, logger=logging.getLogger("wallpaper_admin.service"))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)
    app.include_router(router)
    return app
