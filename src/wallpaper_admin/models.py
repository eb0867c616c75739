"""Database models."""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from .database import Base
from .errors import ModelValidationError

ADMIN_ROLES = ("admin",)

WALLPAPER_CATEGORIES = (
    "lord_krishna",
    "lord_ram",
    "lord_karna",
    "lord_arjun",
    "lord_shiva",
    "lord_vishnu",
    "lord_ganesha",
    "lord_hanuman",
    "lord_brahma",
    "lord_indra",
    "lord_surya",
    "others",
)
WALLPAPER_STYLES = ("anime", "real")

# Basic URL shape checked at the store, independent of request validation.
IMAGE_URL_PATTERN = re.compile(r"^(https?://)?([\da-z.-]+)\.([a-z.]{2,6})([/\w .-]*)/?$")


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _require_text(value: Optional[str], label: str, *, minimum: int = 1, maximum: Optional[int] = None) -> str:
    text = (value or "").strip()
    if not text:
        raise ModelValidationError(f"{label} is required.")
    if len(text) < minimum:
        raise ModelValidationError(f"{label} must be at least {minimum} characters long.")
    if maximum is not None and len(text) > maximum:
        raise ModelValidationError(f"{label} must be at most {maximum} characters long.")
    return text


class AdminUser(Base):
    """An administrator allowed to manage wallpapers."""

    __tablename__ = "admin_users"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="admin")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    wallpapers: Mapped[list["Wallpaper"]] = relationship(back_populates="owner", passive_deletes=True)

    @validates("email")
    def _validate_email(self, _key: str, value: str) -> str:
        return _require_text(value, "Email").lower()

    @validates("first_name", "last_name")
    def _validate_name(self, key: str, value: str) -> str:
        label = "First name" if key == "first_name" else "Last name"
        return _require_text(value, label)

    @validates("role")
    def _validate_role(self, _key: str, value: str) -> str:
        if value not in ADMIN_ROLES:
            raise ModelValidationError(f"`{value}` is not a valid role.")
        return value

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<AdminUser email={self.email!r}>"


class Wallpaper(Base):
    """A wallpaper record published by an administrator."""

    __tablename__ = "wallpapers"
    __table_args__ = (
        Index("ix_wallpapers_category_style", "category", "wallpaper_style"),
        Index("ix_wallpapers_download_count", "download_count"),
        Index("ix_wallpapers_keywords", "keywords"),
        Index("ix_wallpapers_created_at", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str] = mapped_column(String(2048), nullable=False)
    keywords: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    wallpaper_style: Mapped[str] = mapped_column(String(16), nullable=False)
    download_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    admin_id: Mapped[Optional[str]] = mapped_column(
        String(32), ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    owner: Mapped[Optional[AdminUser]] = relationship(back_populates="wallpapers", lazy="raise")

    @validates("title")
    def _validate_title(self, _key: str, value: str) -> str:
        return _require_text(value, "Title", minimum=3, maximum=200)

    @validates("description")
    def _validate_description(self, _key: str, value: str) -> str:
        return _require_text(value, "Description", minimum=10, maximum=1000)

    @validates("image_url")
    def _validate_image_url(self, _key: str, value: str) -> str:
        url = (value or "").strip()
        if not IMAGE_URL_PATTERN.match(url):
            raise ModelValidationError("Please provide a valid URL")
        return url

    @validates("keywords")
    def _validate_keywords(self, _key: str, value: list[str]) -> list[str]:
        if not value or len(value) > 20:
            raise ModelValidationError("Keywords must contain at least 1 and at most 20 items")
        return list(value)

    @validates("category")
    def _validate_category(self, _key: str, value: str) -> str:
        if value not in WALLPAPER_CATEGORIES:
            raise ModelValidationError(f"`{value}` is not a valid category.")
        return value

    @validates("wallpaper_style")
    def _validate_style(self, _key: str, value: str) -> str:
        if value not in WALLPAPER_STYLES:
            raise ModelValidationError(f"`{value}` is not a valid wallpaper style.")
        return value

    @validates("download_count")
    def _validate_download_count(self, _key: str, value: int) -> int:
        if value is None or value < 0:
            raise ModelValidationError("Download count cannot be negative.")
        return value

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Wallpaper title={self.title!r} downloads={self.download_count}>"
