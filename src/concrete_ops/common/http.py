"""Small helpers for reading JSON bodies and query strings inside route handlers."""
from __future__ import annotations

from datetime import date
from typing import Any, Optional

from flask import request

from ..core.exceptions import ValidationError
from .datetime_utils import parse_optional_date


def json_body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def query_date(name: str) -> Optional[date]:
    return parse_optional_date(request.args.get(name))


def query_int(name: str, default: Optional[int] = None) -> Optional[int]:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a whole number")


def query_flag(name: str) -> bool:
    return (request.args.get(name) or "").lower() == "true"


def ok(data: Any = None, *, message: Optional[str] = None, **extra: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    body["data"] = data
    body.update(extra)
    return body
