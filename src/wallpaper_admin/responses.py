"""The uniform ``{success, message?, data?}`` JSON envelope."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Literal, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


@dataclass(frozen=True, slots=True)
class Cookie:
    """A cookie directive applied to the response before the body is sent."""

    key: str
    value: str
    httponly: bool = True
    secure: bool = True
    samesite: Literal["lax", "strict", "none"] = "lax"
    max_age: Optional[int] = None
    path: str = "/"


def has_payload(data: Any) -> bool:
    """Return whether *data* belongs in the envelope.

    Follows JavaScript truthiness: ``None``, ``False``, zero and the empty
    string are dropped while empty lists and dicts are kept.
    """

    if data is None or isinstance(data, str) and not data:
        return False
    if isinstance(data, (bool, int, float)):
        return bool(data)
    return True


def envelope(
    success: bool = True,
    status_code: int = 200,
    message: Optional[str] = None,
    data: Any = None,
    *,
    cookies: Iterable[Cookie] = (),
    clear_cookies: Iterable[str] = (),
) -> JSONResponse:
    """Build the JSON response every endpoint returns."""

    body: dict[str, Any] = {"success": success}
    if message:
        body["message"] = message
    if has_payload(data):
        body["data"] = jsonable_encoder(data, by_alias=True)

    response = JSONResponse(content=body, status_code=status_code)
    for cookie in cookies:
        response.set_cookie(
            key=cookie.key,
            value=cookie.value,
            httponly=cookie.httponly,
            secure=cookie.secure,
            samesite=cookie.samesite,
            max_age=cookie.max_age,
            path=cookie.path,
        )
    for key in clear_cookies:
        response.delete_cookie(key, path="/")
    return response
