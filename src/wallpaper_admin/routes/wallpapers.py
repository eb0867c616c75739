"""Wallpaper catalogue endpoints."""

from __future__ import annotations

import logging
from functools import partial
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from .. import crud, schemas
from ..auth import get_current_admin
from ..database import Database
from ..dependencies import get_database, get_db
from ..errors import InvalidIdError, InvalidTokenError, NotFoundError
from ..models import WALLPAPER_CATEGORIES, WALLPAPER_STYLES, Wallpaper
from ..responses import envelope
from ..validation import validate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/wallpapers", tags=["wallpapers"])

FEATURED_LIMIT = 10
RECENT_LIMIT = 10
PER_CATEGORY_LIMIT = 3

INVALID_ID = "Invalid wallpaper ID"
NOT_FOUND = "Wallpaper not found"


def _check_id(wallpaper_id: str) -> None:
    if not crud.is_valid_id(wallpaper_id):
        raise InvalidIdError(INVALID_ID)


@router.get("/home")
async def home(database: Database = Depends(get_database)) -> JSONResponse:
    featured, recent, total, downloads, *buckets = await database.gather(
        partial(crud.top_wallpapers, order_by="downloadCount", limit=FEATURED_LIMIT),
        partial(crud.top_wallpapers, order_by="createdAt", limit=RECENT_LIMIT),
        partial(crud.count_wallpapers, conditions=[Wallpaper.is_active.is_(True)]),
        crud.total_active_downloads,
        *(
            partial(crud.top_wallpapers, category=category, limit=PER_CATEGORY_LIMIT)
            for category in WALLPAPER_CATEGORIES
        ),
    )

    data = schemas.HomeData(
        featured=[schemas.FeaturedWallpaper.model_validate(item) for item in featured],
        recent=[schemas.RecentWallpaper.model_validate(item) for item in recent],
        categories=[
            schemas.CategoryBucket(
                category=category,
                wallpapers=[schemas.CategoryWallpaper.model_validate(item) for item in wallpapers],
            )
            for category, wallpapers in zip(WALLPAPER_CATEGORIES, buckets)
            if wallpapers
        ],
        statistics=schemas.HomeStatistics(
            total_wallpapers=total,
            total_downloads=downloads,
            available_categories=list(WALLPAPER_CATEGORIES),
            available_styles=list(WALLPAPER_STYLES),
        ),
    )
    return envelope(True, status.HTTP_200_OK, "Home screen data retrieved successfully", data)


@router.get("")
async def list_wallpapers(request: Request, database: Database = Depends(get_database)) -> JSONResponse:
    query = validate(schemas.WallpaperListQuery, dict(request.query_params)).unwrap("Invalid query parameters")
    skip = (query.page - 1) * query.limit
    conditions = crud.wallpaper_filters(query)

    wallpapers, total = await database.gather(
        partial(
            crud.list_wallpapers,
            conditions=conditions,
            sort_by=query.sort_by,
            sort_order=query.sort_order,
            skip=skip,
            limit=query.limit,
        ),
        partial(crud.count_wallpapers, conditions=conditions),
    )
    data = {
        "wallpapers": [schemas.WallpaperDetail.from_model(wallpaper) for wallpaper in wallpapers],
        "pagination": schemas.build_pagination(query.page, query.limit, total, "totalWallpapers"),
    }
    return envelope(True, status.HTTP_200_OK, "Wallpapers retrieved successfully", data)


@router.get("/{wallpaper_id}")
async def get_wallpaper(wallpaper_id: str, db: AsyncSession = Depends(get_db)) -> JSONResponse:
    _check_id(wallpaper_id)

    # Viewing a wallpaper counts as a download.
    if await crud.increment_download_count(db, wallpaper_id) is None:
        raise NotFoundError(NOT_FOUND)
    wallpaper = await crud.get_wallpaper(db, wallpaper_id, with_owner=True)
    if not wallpaper:
        raise NotFoundError(NOT_FOUND)
    return envelope(
        True,
        status.HTTP_200_OK,
        "Wallpaper retrieved successfully",
        schemas.WallpaperDetail.from_model(wallpaper),
    )


@router.post("/{wallpaper_id}/download")
async def increment_download(wallpaper_id: str, db: AsyncSession = Depends(get_db)) -> JSONResponse:
    _check_id(wallpaper_id)

    count = await crud.increment_download_count(db, wallpaper_id)
    if count is None:
        raise NotFoundError(NOT_FOUND)
    return envelope(
        True,
        status.HTTP_200_OK,
        "Download count incremented successfully",
        schemas.DownloadCount(download_count=count),
    )


@router.post("")
async def create_wallpaper(
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db),
    current: schemas.AdminIdentity = Depends(get_current_admin),
) -> JSONResponse:
    body = validate(schemas.WallpaperCreate, payload).unwrap()

    # The token may outlive its admin.
    if not await crud.get_admin(db, current.id):
        raise InvalidTokenError()
    wallpaper = await crud.create_wallpaper(db, body, admin_id=current.id)
    logger.info("Admin %s created wallpaper %s", current.email, wallpaper.id)
    return envelope(
        True,
        status.HTTP_201_CREATED,
        "Wallpaper created successfully",
        schemas.WallpaperRead.model_validate(wallpaper),
    )


@router.put("/{wallpaper_id}")
async def update_wallpaper(
    wallpaper_id: str,
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db),
    _: schemas.AdminIdentity = Depends(get_current_admin),
) -> JSONResponse:
    _check_id(wallpaper_id)

    body = validate(schemas.WallpaperUpdate, payload).unwrap()

    wallpaper = await crud.get_wallpaper(db, wallpaper_id)
    if not wallpaper:
        raise NotFoundError(NOT_FOUND)
    wallpaper = await crud.update_wallpaper(db, wallpaper, body.changes())
    return envelope(
        True,
        status.HTTP_200_OK,
        "Wallpaper updated successfully",
        schemas.WallpaperRead.model_validate(wallpaper),
    )


@router.delete("/{wallpaper_id}")
async def delete_wallpaper(
    wallpaper_id: str,
    db: AsyncSession = Depends(get_db),
    _: schemas.AdminIdentity = Depends(get_current_admin),
) -> JSONResponse:
    _check_id(wallpaper_id)

    if not await crud.delete_wallpaper(db, wallpaper_id):
        raise NotFoundError(NOT_FOUND)
    return envelope(True, status.HTTP_200_OK, "Wallpaper deleted successfully")
