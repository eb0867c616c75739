"""Non-raising schema validation returning field-level errors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import RequestValidationFailed

ModelT = TypeVar("ModelT", bound=BaseModel)


def format_errors(exc: ValidationError) -> list[dict[str, Any]]:
    """Flatten a pydantic error into ``{code, path, message}`` entries.

    ``path`` is the bare field name for top-level fields and the list of
    segments for nested locations.
    """

    formatted = []
    for error in exc.errors(include_url=False):
        loc = list(error["loc"])
        formatted.append(
            {
                "code": error["type"],
                "path": loc[0] if len(loc) == 1 else loc,
                "message": error["msg"],
            }
        )
    return formatted


@dataclass(slots=True)
class ValidationResult(Generic[ModelT]):
    value: Optional[ModelT] = None
    errors: list[dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.errors

    def unwrap(self, message: str | None = None) -> ModelT:
        """Return the value or raise ``RequestValidationFailed``."""

        if not self.ok:
            raise RequestValidationFailed(self.errors, message)
        return self.value


def validate(model: type[ModelT], raw: Any) -> ValidationResult[ModelT]:
    """Validate *raw* against *model* without raising."""

    try:
        value = model.model_validate({} if raw is None else raw)
    except ValidationError as exc:
        return ValidationResult(errors=format_errors(exc))
    return ValidationResult(value=value)
