"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from .config import Settings
from .context import AppContext
from .database import Database


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_settings_dep(context: AppContext = Depends(get_context)) -> Settings:
    return context.settings


def get_database(context: AppContext = Depends(get_context)) -> Database:
    return context.database


async def get_db(database: Database = Depends(get_database)) -> AsyncIterator[AsyncSession]:
    """Provide a database session for FastAPI routes."""

    async with database.session() as session:
        yield session
