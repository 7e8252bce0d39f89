"""
Configuration helpers for the Cardfolio backend.

Exposes a Settings object that reads environment variables (public base URL,
database, SMTP, storage paths, token lifetimes, upload limits) so that
routers/services do not fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    public_base_url: str
    uploads_dir: str
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    smtp_from: str
    session_ttl_seconds: int
    otp_ttl_seconds: int
    max_upload_bytes: int
    log_level: str


def _default_uploads_dir() -> str:
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "uploads"))


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./cardfolio.db"),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:5000").rstrip("/"),
        uploads_dir=os.getenv("UPLOADS_DIR") or _default_uploads_dir(),
        smtp_host=os.getenv("SMTP_HOST", ""),
        smtp_port=_int(os.getenv("SMTP_PORT", "465"), 465),
        smtp_user=os.getenv("SMTP_USER", ""),
        smtp_password=os.getenv("SMTP_PASSWORD", ""),
        smtp_from=os.getenv("SMTP_FROM", os.getenv("SMTP_USER", "")),
        # sessions last 5 hours
        session_ttl_seconds=_int(os.getenv("SESSION_TTL_SECONDS", "18000"), 18000),
        otp_ttl_seconds=_int(os.getenv("OTP_TTL_SECONDS", "900"), 900),
        max_upload_bytes=_int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)), 5 * 1024 * 1024),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
