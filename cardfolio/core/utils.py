"""
Utility helpers shared across routers/services.
"""

from datetime import date, datetime, timezone
from typing import Optional

from .config import get_settings


def absolute_url(path: str, base: Optional[str] = None) -> str:
    """
    Turn a server-relative path (uploads, public pages) into an absolute URL
    using PUBLIC_BASE_URL.
    """
    settings = get_settings()
    base_url = (base or settings.public_base_url).rstrip("/")
    if not path:
        return base_url + "/"
    if path.startswith("http://") or path.startswith("https://"):
        return path
    if not path.startswith("/"):
        path = "/" + path
    return base_url + path


def today_iso() -> str:
    return date.today().isoformat()


def next_id(items) -> int:
    """Sequential id following the highest id already present."""
    ids = [int(item.get("id") or 0) for item in items if isinstance(item, dict)]
    return (max(ids) if ids else 0) + 1


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat them as UTC."""
    return value.astimezone(timezone.utc) if value.tzinfo else value.replace(tzinfo=timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
