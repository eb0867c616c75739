"""Endpoints of the skeleton wallpaper service."""

from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

router = APIRouter(prefix="/api/v1/test", tags=["test"])

HELLO_MESSAGE = "Hello World! Your API is working correctly."


@router.post("/hello")
async def hello() -> JSONResponse:
    """Confirm the service is reachable."""

    return JSONResponse(status_code=status.HTTP_200_OK, content={"message": HELLO_MESSAGE})
