"""Database utilities."""

from __future__ import annotations

import asyncio
import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

Operation = Callable[[AsyncSession], Awaitable[Any]]


class Base(DeclarativeBase):
    """Base model for SQLAlchemy mappings."""


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and session factory for one application instance."""

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self.url = url
        self.engine: AsyncEngine = create_async_engine(
            url, echo=echo, json_serializer=lambda value: json.dumps(value, ensure_ascii=False)
        )
        if url.startswith("sqlite"):
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self.sessionmaker = async_sessionmaker(
            bind=self.engine, autoflush=False, expire_on_commit=False
        )

    async def create_all(self) -> None:
        """Ensure that the database schema exists."""

        from . import models  # noqa: F401 - ensure models are imported

        async with self.engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Provide a transactional scope around a series of operations."""

        session = self.sessionmaker()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def gather(self, *operations: Operation) -> list[Any]:
        """Run independent read operations concurrently, one session each.

        The first failure propagates and fails the whole batch.
        """

        async def _run(operation: Operation) -> Any:
            async with self.sessionmaker() as session:
                return await operation(session)

        return list(await asyncio.gather(*(_run(operation) for operation in operations)))
