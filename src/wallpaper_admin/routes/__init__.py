"""HTTP route groups."""

from fastapi import APIRouter

from . import auth, wallpapers

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(wallpapers.router)

__all__ = ["api_router"]
