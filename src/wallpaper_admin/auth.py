"""Authentication helpers for protected routes."""

from __future__ import annotations

from fastapi import Depends, Request
from pydantic import ValidationError

from . import schemas, security
from .config import Settings
from .dependencies import get_settings_dep
from .errors import InvalidTokenError, MissingTokenError
from .responses import Cookie

ACCESS_TOKEN_COOKIE = "access_token"


def build_claims(admin) -> dict:
    """Return the token claims for *admin*: its public record without the password."""

    return schemas.AdminRead.model_validate(admin).model_dump(mode="json", by_alias=True)


def access_cookie(token: str, settings: Settings) -> Cookie:
    return Cookie(
        key=ACCESS_TOKEN_COOKIE,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        max_age=settings.jwt_expire_seconds,
    )


def get_current_admin(
    request: Request, settings: Settings = Depends(get_settings_dep)
) -> schemas.AdminIdentity:
    """Require a valid access token cookie and return its decoded claims."""

    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if not token:
        raise MissingTokenError()

    claims = security.parse_token(token, settings.jwt_secret)
    try:
        return schemas.AdminIdentity.model_validate(claims)
    except ValidationError as exc:
        raise InvalidTokenError() from exc
