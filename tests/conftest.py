"""
Shared fixtures: a temporary SQLite database and uploads folder per test,
an in-process app and an outbox that captures the e-mailed codes.
"""
from __future__ import annotations

import io
import os
import sys
from pathlib import Path

import pytest

# Make the cardfolio package importable when running the tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cardfolio.client.config import get_client_settings  # noqa: E402
from cardfolio.core import config as core_config  # noqa: E402
from cardfolio.core.rate_limiter import reset_limits  # noqa: E402
from cardfolio.db import models  # noqa: E402
from cardfolio.db import session as db_session  # noqa: E402
import cardfolio.services.auth_service as auth_service  # noqa: E402


def _clear_caches() -> None:
    core_config.get_settings.cache_clear()
    get_client_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def db_env(tmp_path, monkeypatch):
    """Temporary SQLite database and uploads dir; caches are reset around the test."""
    db_file = tmp_path / "test.db"
    uploads_dir = tmp_path / "uploads"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.setenv("UPLOADS_DIR", str(uploads_dir))
    monkeypatch.setenv("PUBLIC_BASE_URL", "http://cards.test")
    monkeypatch.setenv("CARDFOLIO_HOME", str(tmp_path / "home"))
    for name in ("SMTP_HOST", "SMTP_USER", "SMTP_PASSWORD", "SMTP_FROM"):
        monkeypatch.delenv(name, raising=False)
    _clear_caches()
    reset_limits()

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield tmp_path

    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()
    _clear_caches()


@pytest.fixture()
def outbox(monkeypatch):
    """Capture codes instead of sending e-mail."""
    sent: list[dict] = []

    def _capture(to_email, subject, purpose, code, ttl_minutes):
        sent.append({"to": to_email, "subject": subject, "purpose": purpose, "code": code})
        return True

    monkeypatch.setattr(auth_service, "send_code_email", _capture)
    return sent


@pytest.fixture()
def client(db_env, outbox):
    from fastapi.testclient import TestClient

    from cardfolio.app import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture()
def signup(client, outbox):
    """Register + verify an account through the API; returns (token, user)."""

    def _signup(email: str = "alice@example.com", name: str = "Alice", password: str = "s3cret-pass"):
        resp = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
        assert resp.status_code == 200, resp.text
        code = [m for m in outbox if m["to"] == email][-1]["code"]
        resp = client.post("/api/auth/register/verify", json={"email": email, "code": code})
        assert resp.status_code == 200, resp.text
        data = resp.json()["data"]
        return data["token"], data["user"]

    return _signup


@pytest.fixture()
def make_png():
    """Noisy PNG bytes; noise keeps the file well above the minimum upload size."""

    def _make(size=(64, 48)) -> bytes:
        from PIL import Image

        width, height = size
        buf = io.BytesIO()
        Image.frombytes("RGB", size, os.urandom(width * height * 3)).save(buf, format="PNG")
        return buf.getvalue()

    return _make
