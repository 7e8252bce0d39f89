"""Response envelope shared by every JSON route."""
from __future__ import annotations

from typing import Any


def envelope(data: Any = None, message: str = "", **extra: Any) -> dict:
    body = {"success": True, "message": message, "data": data}
    body.update(extra)
    return body


def error_body(message: str, **extra: Any) -> dict:
    body = {"success": False, "message": message}
    body.update(extra)
    return body
