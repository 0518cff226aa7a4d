from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required", {field_name: "is required"})
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(
            f"{field_name} must be at least {min_len} characters",
            {field_name: f"must be at least {min_len} characters"},
        )
    return value


def require_int_range(value: Any, field_name: str, lo: int, hi: int) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer", {field_name: "must be an integer"})
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer", {field_name: "must be an integer"})
    if isinstance(value, float) and value != number:
        raise ValidationError(f"{field_name} must be an integer", {field_name: "must be an integer"})
    if number < lo or number > hi:
        raise ValidationError(
            f"{field_name} must be between {lo} and {hi}",
            {field_name: f"must be between {lo} and {hi}"},
        )
    return number


class FieldErrors:
    """Collects per-field validation failures so all of them are reported together.

    Usage::

        errors = FieldErrors()
        month = errors.check(parse_month, raw_month)
        errors.raise_if_any()
    """

    def __init__(self) -> None:
        self._errors: dict[str, str] = {}

    def check(self, fn, *args, **kwargs) -> Optional[Any]:
        try:
            return fn(*args, **kwargs)
        except ValidationError as exc:
            self._errors.update(exc.field_errors or {"input": str(exc)})
            return None

    def add(self, field_name: str, message: str) -> None:
        self._errors.setdefault(field_name, message)

    def has(self, field_name: str) -> bool:
        return field_name in self._errors

    def raise_if_any(self, message: str = "Validation error") -> None:
        if self._errors:
            raise ValidationError(message, self._errors)
