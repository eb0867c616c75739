"""Database access helpers."""

from __future__ import annotations

import re
from typing import Any, Optional, Sequence

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.elements import ColumnElement

from . import models, schemas, security
from .errors import DuplicateKeyError

_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")

_SORT_COLUMNS = {
    "createdAt": models.Wallpaper.created_at,
    "downloadCount": models.Wallpaper.download_count,
    "title": models.Wallpaper.title,
}


def is_valid_id(value: str) -> bool:
    return bool(_ID_PATTERN.match(value or ""))


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


# --- admins ---------------------------------------------------------------


async def list_admins(session: AsyncSession, *, skip: int = 0, limit: int = 10) -> list[models.AdminUser]:
    statement = (
        select(models.AdminUser)
        .order_by(models.AdminUser.created_at.desc(), models.AdminUser.id)
        .offset(skip)
        .limit(limit)
    )
    return list(await session.scalars(statement))


async def count_admins(session: AsyncSession) -> int:
    return await session.scalar(select(func.count()).select_from(models.AdminUser)) or 0


async def get_admin(session: AsyncSession, admin_id: str) -> Optional[models.AdminUser]:
    return await session.get(models.AdminUser, admin_id)


async def get_admin_by_email(session: AsyncSession, email: str) -> Optional[models.AdminUser]:
    statement = select(models.AdminUser).where(models.AdminUser.email == email.strip().lower())
    return (await session.scalars(statement)).first()


async def create_admin(
    session: AsyncSession,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: str = "admin",
) -> models.AdminUser:
    password = security.check_password_strength(password)
    admin = models.AdminUser(
        email=email,
        password_hash=security.hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=role,
    )
    session.add(admin)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateKeyError("email") from exc
    await session.refresh(admin)
    return admin


async def delete_admin(session: AsyncSession, admin: models.AdminUser) -> None:
    await session.execute(delete(models.AdminUser).where(models.AdminUser.id == admin.id))
    await session.commit()


async def authenticate_admin(session: AsyncSession, email: str, password: str) -> Optional[models.AdminUser]:
    """Return the matching admin when the credentials are valid."""

    admin = await get_admin_by_email(session, email)
    if not admin:
        return None
    if not security.verify_password(password, admin.password_hash):
        return None
    return admin


# --- wallpapers -----------------------------------------------------------


async def create_wallpaper(
    session: AsyncSession, payload: schemas.WallpaperCreate, *, admin_id: str
) -> models.Wallpaper:
    wallpaper = models.Wallpaper(**payload.model_dump(), admin_id=admin_id)
    session.add(wallpaper)
    await session.commit()
    await session.refresh(wallpaper)
    return wallpaper


async def get_wallpaper(
    session: AsyncSession, wallpaper_id: str, *, with_owner: bool = False
) -> Optional[models.Wallpaper]:
    statement = select(models.Wallpaper).where(models.Wallpaper.id == wallpaper_id)
    if with_owner:
        statement = statement.options(selectinload(models.Wallpaper.owner))
    return (await session.scalars(statement)).first()


async def update_wallpaper(
    session: AsyncSession, wallpaper: models.Wallpaper, changes: dict[str, Any]
) -> models.Wallpaper:
    for key, value in changes.items():
        setattr(wallpaper, key, value)
    session.add(wallpaper)
    await session.commit()
    await session.refresh(wallpaper)
    return wallpaper


async def delete_wallpaper(session: AsyncSession, wallpaper_id: str) -> bool:
    result = await session.execute(delete(models.Wallpaper).where(models.Wallpaper.id == wallpaper_id))
    await session.commit()
    return result.rowcount > 0


async def increment_download_count(session: AsyncSession, wallpaper_id: str) -> Optional[int]:
    """Atomically add one to the download counter and return the new value.

    Returns ``None`` when no wallpaper has that id.
    """

    result = await session.execute(
        update(models.Wallpaper)
        .where(models.Wallpaper.id == wallpaper_id)
        .values(download_count=models.Wallpaper.download_count + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await session.rollback()
        return None
    count = await session.scalar(
        select(models.Wallpaper.download_count).where(models.Wallpaper.id == wallpaper_id)
    )
    await session.commit()
    return count


def _keyword_matches(pattern: str) -> ColumnElement[bool]:
    """EXISTS clause matching *pattern* against each element of the keywords array."""

    element = func.json_each(models.Wallpaper.keywords).table_valued("value")
    return (
        select(1)
        .select_from(element)
        .where(element.c.value.ilike(pattern, escape="\\"))
        .exists()
    )


def wallpaper_filters(query: schemas.WallpaperListQuery) -> list[ColumnElement[bool]]:
    """Translate list query parameters into WHERE clauses."""

    conditions: list[ColumnElement[bool]] = []
    if query.category != schemas.ALL:
        conditions.append(models.Wallpaper.category == query.category)
    if query.wallpaper_style != schemas.ALL:
        conditions.append(models.Wallpaper.wallpaper_style == query.wallpaper_style)
    if query.keyword:
        pattern = _like_pattern(query.keyword)
        conditions.append(
            or_(
                models.Wallpaper.title.ilike(pattern, escape="\\"),
                models.Wallpaper.description.ilike(pattern, escape="\\"),
                _keyword_matches(pattern),
            )
        )
    if query.is_active is not None:
        conditions.append(models.Wallpaper.is_active.is_(query.is_active))
    return conditions


async def list_wallpapers(
    session: AsyncSession,
    conditions: Sequence[ColumnElement[bool]],
    *,
    sort_by: str = "createdAt",
    sort_order: str = "desc",
    skip: int = 0,
    limit: int = 10,
) -> list[models.Wallpaper]:
    column = _SORT_COLUMNS[sort_by]
    ordering = column.asc() if sort_order == "asc" else column.desc()
    statement = (
        select(models.Wallpaper)
        .options(selectinload(models.Wallpaper.owner))
        .where(*conditions)
        .order_by(ordering, models.Wallpaper.id)
        .offset(skip)
        .limit(limit)
    )
    return list(await session.scalars(statement))


async def count_wallpapers(session: AsyncSession, conditions: Sequence[ColumnElement[bool]] = ()) -> int:
    statement = select(func.count()).select_from(models.Wallpaper).where(*conditions)
    return await session.scalar(statement) or 0


async def top_wallpapers(
    session: AsyncSession,
    *,
    order_by: str = "downloadCount",
    limit: int = 10,
    category: Optional[str] = None,
) -> list[models.Wallpaper]:
    """Return active wallpapers ranked by *order_by*, newest or most downloaded first."""

    statement = select(models.Wallpaper).where(models.Wallpaper.is_active.is_(True))
    if category is not None:
        statement = statement.where(models.Wallpaper.category == category)
    statement = statement.order_by(_SORT_COLUMNS[order_by].desc(), models.Wallpaper.id).limit(limit)
    return list(await session.scalars(statement))


async def total_active_downloads(session: AsyncSession) -> int:
    statement = select(func.coalesce(func.sum(models.Wallpaper.download_count), 0)).where(
        models.Wallpaper.is_active.is_(True)
    )
    return int(await session.scalar(statement) or 0)
