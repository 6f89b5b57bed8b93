from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: Optional[str]) -> str:
    email = require_non_empty(value, "Email").lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Invalid email format")
    return email


def require_coordinate(value: Any, field_name: str) -> float:
    # bool is an int subclass; a JSON true is not a coordinate.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("Invalid location data. Latitude and longitude are required.")
    return float(value)


def require_positive_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")
    if number < 1:
        raise ValidationError(f"{field_name} must be at least 1")
    return number


def optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def pick_fields(body: Mapping[str, Any], allowed: Iterable[str]) -> dict[str, Any]:
    """Keep only whitelisted keys from a request body."""
    return {k: body[k] for k in allowed if k in body}


_TRUE_STRINGS = {"true", "1", "yes"}
_FALSE_STRINGS = {"false", "0", "no"}


def parse_bool(value: Any, field_name: str) -> bool:
    """Accept JSON booleans, 0/1, or their string forms; anything else is rejected."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ValidationError(f"{field_name} must be true or false")
