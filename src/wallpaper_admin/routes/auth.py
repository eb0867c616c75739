"""Admin authentication and admin-user management endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from .. import crud, schemas, security
from ..auth import ACCESS_TOKEN_COOKIE, access_cookie, build_claims, get_current_admin
from ..config import Settings
from ..database import Database
from ..dependencies import get_database, get_db, get_settings_dep
from ..errors import InvalidIdError, NotFoundError
from ..responses import envelope
from ..validation import validate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

INVALID_CREDENTIALS = "Invalid email or password"
ADMIN_NOT_FOUND = "Admin not found"


@router.post("/register")
async def register(payload: Any = Body(None), db: AsyncSession = Depends(get_db)) -> JSONResponse:
    body = validate(schemas.RegisterRequest, payload).unwrap()

    email = body.email.lower()
    if await crud.get_admin_by_email(db, email):
        return envelope(False, status.HTTP_400_BAD_REQUEST, "Email already exists, please use another email")

    admin = await crud.create_admin(
        db,
        email=email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        role=body.role,
    )
    logger.info("Registered admin %s", admin.email)
    return envelope(
        True,
        status.HTTP_201_CREATED,
        "User registered successfully",
        schemas.AdminSummary.model_validate(admin),
    )


@router.post("/login")
async def login(
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
) -> JSONResponse:
    body = validate(schemas.LoginRequest, payload).unwrap()

    admin = await crud.authenticate_admin(db, body.email, body.password)
    if not admin:
        return envelope(False, status.HTTP_400_BAD_REQUEST, INVALID_CREDENTIALS)

    token = security.issue_token(build_claims(admin), settings.jwt_secret, settings.jwt_expire_seconds)
    return envelope(
        True,
        status.HTTP_200_OK,
        "Login successful",
        schemas.AdminSummary.model_validate(admin),
        cookies=[access_cookie(token, settings)],
    )


@router.post("/logout")
async def logout(_: schemas.AdminIdentity = Depends(get_current_admin)) -> JSONResponse:
    return envelope(True, status.HTTP_200_OK, "Logout successful", clear_cookies=[ACCESS_TOKEN_COOKIE])


@router.get("/me")
async def me(current: schemas.AdminIdentity = Depends(get_current_admin)) -> JSONResponse:
    claims = current.model_dump(mode="json", by_alias=True)
    claims.pop("iat", None)
    claims.pop("exp", None)
    return envelope(True, status.HTTP_200_OK, "User details retrieved successfully", claims)


@router.get("")
async def list_admins(
    request: Request,
    database: Database = Depends(get_database),
    _: schemas.AdminIdentity = Depends(get_current_admin),
) -> JSONResponse:
    query = schemas.PageQuery.from_query(request.query_params)
    skip = (query.page - 1) * query.limit

    admins, total = await database.gather(
        lambda session: crud.list_admins(session, skip=skip, limit=query.limit),
        crud.count_admins,
    )
    data = {
        "admins": [schemas.AdminRead.model_validate(admin) for admin in admins],
        "pagination": schemas.build_pagination(query.page, query.limit, total, "totalAdmins"),
    }
    return envelope(True, status.HTTP_200_OK, "Admins retrieved successfully", data)


@router.get("/{admin_id}")
async def get_admin(
    admin_id: str,
    db: AsyncSession = Depends(get_db),
    _: schemas.AdminIdentity = Depends(get_current_admin),
) -> JSONResponse:
    if not crud.is_valid_id(admin_id):
        raise InvalidIdError()

    admin = await crud.get_admin(db, admin_id)
    if not admin:
        raise NotFoundError(ADMIN_NOT_FOUND)
    return envelope(True, status.HTTP_200_OK, "Admin retrieved successfully", schemas.AdminRead.model_validate(admin))


@router.delete("/{admin_id}")
async def delete_admin(
    admin_id: str,
    db: AsyncSession = Depends(get_db),
    current: schemas.AdminIdentity = Depends(get_current_admin),
) -> JSONResponse:
    if current.id == admin_id:
        return envelope(False, status.HTTP_400_BAD_REQUEST, "You cannot delete your own account")
    if not crud.is_valid_id(admin_id):
        raise InvalidIdError()

    admin = await crud.get_admin(db, admin_id)
    if not admin:
        raise NotFoundError(ADMIN_NOT_FOUND)

    await crud.delete_admin(db, admin)
    logger.info("Admin %s deleted admin %s", current.email, admin.email)
    return envelope(True, status.HTTP_200_OK, "Admin deleted successfully")
