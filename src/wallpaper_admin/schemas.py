"""Pydantic schemas for API payloads."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Literal, Mapping, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from .models import ADMIN_ROLES, WALLPAPER_CATEGORIES, WALLPAPER_STYLES

# Symbol set accepted at the request boundary. The store accepts a broader
# set; see security.STORE_PASSWORD_SYMBOLS.
PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)(?=.*[@$!%*#?&])[A-Za-z\d@$!%*#?&]+$")
PASSWORD_MESSAGE = "Password must contain at least one letter, one number and one special character"

ALL = "all"

# Keeps (page - 1) * limit inside a 64-bit SQL integer.
MAX_PAGE_VALUE = 1_000_000_000

_url_adapter = TypeAdapter(AnyUrl)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _check_length(value: str, *, minimum: int, maximum: int, too_short: str, too_long: str) -> str:
    if len(value) < minimum:
        raise PydanticCustomError("too_small", too_short)
    if len(value) > maximum:
        raise PydanticCustomError("too_big", too_long)
    return value


def _check_email(value: str) -> str:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise PydanticCustomError("invalid_format", "Invalid email format") from exc
    return value


def _check_password(value: str) -> str:
    if len(value) < 6:
        raise PydanticCustomError("too_small", "Password must be at least 6 characters long")
    if not PASSWORD_PATTERN.match(value):
        raise PydanticCustomError("invalid_format", PASSWORD_MESSAGE)
    return value


# --- auth -----------------------------------------------------------------


class LoginRequest(CamelModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("password")
    @classmethod
    def _password(cls, value: str) -> str:
        return _check_password(value)


class RegisterRequest(LoginRequest):
    first_name: str
    last_name: str
    role: str

    @field_validator("first_name")
    @classmethod
    def _first_name(cls, value: str) -> str:
        return _check_length(
            value,
            minimum=1,
            maximum=50,
            too_short="First name is required",
            too_long="First name must be less than 50 characters",
        )

    @field_validator("last_name")
    @classmethod
    def _last_name(cls, value: str) -> str:
        return _check_length(
            value,
            minimum=1,
            maximum=50,
            too_short="Last name is required",
            too_long="Last name must be less than 50 characters",
        )

    @field_validator("role")
    @classmethod
    def _role(cls, value: str) -> str:
        if value not in ADMIN_ROLES:
            raise PydanticCustomError("invalid_value", "Role must be 'admin'")
        return value


class AdminSummary(CamelModel):
    first_name: str
    last_name: str
    role: str
    email: str


class AdminRead(CamelModel):
    id: str = Field(alias="_id")
    email: str
    first_name: str
    last_name: str
    role: str
    created_at: datetime
    updated_at: datetime


class AdminIdentity(AdminRead):
    """Decoded access-token claims attached to authenticated requests."""

    model_config = ConfigDict(extra="allow")


class OwnerSummary(CamelModel):
    id: str = Field(alias="_id")
    first_name: str
    last_name: str
    email: str


class PageQuery(BaseModel):
    page: int = 1
    limit: int = 10

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> "PageQuery":
        """Parse ``page``/``limit`` leniently, falling back to the defaults."""

        return cls(
            page=_positive_int(params.get("page"), 1),
            limit=_positive_int(params.get("limit"), 10),
        )


def _positive_int(raw: Optional[str], default: int) -> int:
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        return default
    return value if 0 < value <= MAX_PAGE_VALUE else default


# --- wallpapers -----------------------------------------------------------


class WallpaperCreate(CamelModel):
    title: str
    description: str
    image_url: str
    keywords: list[str]
    category: str
    wallpaper_style: str

    @field_validator("title")
    @classmethod
    def _title(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _check_length(
            value.strip(),
            minimum=3,
            maximum=200,
            too_short="Title must be at least 3 characters long",
            too_long="Title must be less than 200 characters",
        )

    @field_validator("description")
    @classmethod
    def _description(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _check_length(
            value.strip(),
            minimum=10,
            maximum=1000,
            too_short="Description must be at least 10 characters long",
            too_long="Description must be less than 1000 characters",
        )

    @field_validator("image_url")
    @classmethod
    def _image_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        url = value.strip()
        try:
            _url_adapter.validate_python(url)
        except ValidationError as exc:
            raise PydanticCustomError("invalid_format", "Please provide a valid URL") from exc
        return url

    @field_validator("keywords")
    @classmethod
    def _keywords(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        if value is None:
            return value
        keywords = [keyword.strip() for keyword in value]
        if not keywords:
            raise PydanticCustomError("too_small", "At least one keyword is required")
        if len(keywords) > 20:
            raise PydanticCustomError("too_big", "Maximum 20 keywords allowed")
        if any(not keyword for keyword in keywords):
            raise PydanticCustomError("too_small", "Keywords cannot be empty")
        return keywords

    @field_validator("category")
    @classmethod
    def _category(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in WALLPAPER_CATEGORIES:
            raise PydanticCustomError(
                "invalid_value",
                "Category must be one of: {choices}",
                {"choices": ", ".join(WALLPAPER_CATEGORIES)},
            )
        return value

    @field_validator("wallpaper_style")
    @classmethod
    def _style(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in WALLPAPER_STYLES:
            raise PydanticCustomError("invalid_value", "Style must be either 'anime' or 'real'")
        return value


class WallpaperUpdate(WallpaperCreate):
    title: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    keywords: Optional[list[str]] = None
    category: Optional[str] = None
    wallpaper_style: Optional[str] = None
    is_active: Optional[bool] = None

    def changes(self) -> dict[str, Any]:
        """Return the supplied fields keyed by model attribute name."""

        return self.model_dump(exclude_none=True)


class WallpaperListQuery(CamelModel):
    page: int = 1
    limit: int = 10
    category: str = ALL
    wallpaper_style: str = ALL
    keyword: Optional[str] = None
    sort_by: Literal["createdAt", "downloadCount", "title"] = "createdAt"
    sort_order: Literal["asc", "desc"] = "desc"
    is_active: Optional[bool] = None

    @field_validator("page", "limit")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise PydanticCustomError("too_small", "Must be a positive integer")
        if value > MAX_PAGE_VALUE:
            raise PydanticCustomError(
                "too_big", "Must be at most {maximum}", {"maximum": MAX_PAGE_VALUE}
            )
        return value

    @field_validator("category")
    @classmethod
    def _category(cls, value: str) -> str:
        if value != ALL and value not in WALLPAPER_CATEGORIES:
            raise PydanticCustomError(
                "invalid_value",
                "Category must be one of: {choices}",
                {"choices": ", ".join((*WALLPAPER_CATEGORIES, ALL))},
            )
        return value

    @field_validator("wallpaper_style")
    @classmethod
    def _style(cls, value: str) -> str:
        if value != ALL and value not in WALLPAPER_STYLES:
            raise PydanticCustomError("invalid_value", "Style must be one of: anime, real, all")
        return value

    @field_validator("keyword")
    @classmethod
    def _keyword(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @field_validator("is_active", mode="before")
    @classmethod
    def _is_active(cls, value: Any) -> Optional[bool]:
        if value is True or value == "true":
            return True
        if value is False or value == "false":
            return False
        return None


class WallpaperRead(CamelModel):
    id: str = Field(alias="_id")
    title: str
    description: str
    image_url: str
    keywords: list[str]
    category: str
    wallpaper_style: str
    download_count: int
    admin_id: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class WallpaperDetail(WallpaperRead):
    """Wallpaper with its owner reference expanded."""

    admin_id: Optional[OwnerSummary] = None

    @classmethod
    def from_model(cls, wallpaper: Any) -> "WallpaperDetail":
        data = WallpaperRead.model_validate(wallpaper).model_dump()
        owner = wallpaper.owner
        data["admin_id"] = OwnerSummary.model_validate(owner) if owner is not None else None
        return cls.model_validate(data)


class FeaturedWallpaper(CamelModel):
    id: str = Field(alias="_id")
    title: str
    image_url: str
    category: str
    wallpaper_style: str
    download_count: int


class RecentWallpaper(CamelModel):
    id: str = Field(alias="_id")
    title: str
    image_url: str
    category: str
    wallpaper_style: str
    created_at: datetime


class CategoryWallpaper(CamelModel):
    id: str = Field(alias="_id")
    title: str
    image_url: str
    wallpaper_style: str
    download_count: int


class CategoryBucket(CamelModel):
    category: str
    wallpapers: list[CategoryWallpaper]


class HomeStatistics(CamelModel):
    total_wallpapers: int
    total_downloads: int
    available_categories: list[str] = Field(default_factory=lambda: list(WALLPAPER_CATEGORIES))
    available_styles: list[str] = Field(default_factory=lambda: list(WALLPAPER_STYLES))


class HomeData(CamelModel):
    featured: list[FeaturedWallpaper]
    recent: list[RecentWallpaper]
    categories: list[CategoryBucket]
    statistics: HomeStatistics


class DownloadCount(CamelModel):
    download_count: int


def build_pagination(page: int, limit: int, total: int, total_key: str) -> dict[str, Any]:
    """Return the pagination block shared by list endpoints."""

    total_pages = -(-total // limit)
    return {
        "currentPage": page,
        "totalPages": total_pages,
        total_key: total,
        "limit": limit,
        "hasNextPage": page < total_pages,
        "hasPrevPage": page > 1,
    }
