"""Wallpaper admin backend service."""

from importlib.metadata import PackageNotFoundError, version

try:  # pragma: no cover - handled at runtime
    __version__ = version("wallpaper-admin")
except PackageNotFoundError:  # pragma: no cover - local execution before install
    __version__ = "1.0.0"

__all__ = ["__version__"]
