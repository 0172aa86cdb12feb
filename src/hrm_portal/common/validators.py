from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters long")
    return value


def require_max_length(value: str, field_name: str, max_len: int) -> str:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must not exceed {max_len} characters")
    return value


def normalize_code(value: str, field_name: str, *, min_len: int = 2, max_len: int = 50) -> str:
    """Trim and upper-case an inventory code, enforcing its length bounds."""
    code = require_non_empty(value, field_name).upper()
    require_min_length(code, field_name, min_len)
    require_max_length(code, field_name, max_len)
    return code
