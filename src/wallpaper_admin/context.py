"""Application context built once per app instance and torn down on shutdown."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .config import Settings
from .database import Database


@dataclass(slots=True)
class AppContext:
    """Everything a request handler may need besides the request itself."""

    settings: Settings
    database: Database
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("wallpaper_admin"))

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        settings.ensure_storage()
        return cls(settings=settings, database=Database(settings.database_url))

    async def startup(self) -> None:
        await self.database.create_all()
        self.logger.info("Database ready at %s", self.database.engine.url.render_as_string(hide_password=True))

    async def shutdown(self) -> None:
        await self.database.dispose()
        self.logger.info("Database connections closed")
