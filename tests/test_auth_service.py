from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from cardfolio.core.utils import as_utc, utcnow
from cardfolio.repositories.sql_repository import SQLRepository
from cardfolio.services.auth_service import (
    AccountExistsError,
    AuthService,
    CodeInvalidError,
    InvalidCredentialsError,
    RegistrationError,
)
from cardfolio.services.session_service import user_for_token


def _register(svc, outbox, email="alice@example.com", password="s3cret-pass"):
    svc.register("Alice", email, password)
    return outbox[-1]["code"]


def test_as_utc_treats_naive_values_as_utc():
    naive = datetime(2024, 1, 1, 12, 0)
    assert as_utc(naive) == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    offset = datetime(2024, 1, 1, 9, 0, tzinfo=timezone(timedelta(hours=-3)))
    assert as_utc(offset) == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_register_and_verify_creates_account(db_env, outbox):
    svc = AuthService()
    code = _register(svc, outbox, email="  Alice@Example.com ")
    assert outbox[-1]["to"] == "alice@example.com"
    assert len(code) == 4 and code.isdigit()

    result = svc.verify_registration("alice@example.com", code)
    assert result.user["email"] == "alice@example.com"
    assert result.user["isPremium"] is False
    assert user_for_token(result.token).email == "alice@example.com"
    assert SQLRepository().get_pending_user("alice@example.com") is None


def test_register_validation(db_env, outbox):
    svc = AuthService()
    with pytest.raises(RegistrationError, match="required"):
        svc.register("", "a@example.com", "s3cret-pass")
    with pytest.raises(RegistrationError, match="Invalid email format."):
        svc.register("A", "not-an-email", "s3cret-pass")
    with pytest.raises(RegistrationError, match="at least 8"):
        svc.register("A", "a@example.com", "short")
    assert outbox == []


def test_register_existing_account(db_env, outbox):
    svc = AuthService()
    svc.verify_registration("alice@example.com", _register(svc, outbox))
    with pytest.raises(AccountExistsError):
        svc.register("Alice", "alice@example.com", "s3cret-pass")


def test_verify_rejects_bad_code_format(db_env, outbox):
    svc = AuthService()
    _register(svc, outbox)
    for bad in ("12", "12345", "abcd", ""):
        with pytest.raises(CodeInvalidError, match="exactly 4 digits"):
            svc.verify_registration("alice@example.com", bad)


def test_wrong_code_keeps_pending_registration(db_env, outbox):
    svc = AuthService()
    code = _register(svc, outbox)
    wrong = "0000" if code != "0000" else "1111"
    with pytest.raises(CodeInvalidError, match="Invalid OTP."):
        svc.verify_registration("alice@example.com", wrong)
    assert svc.verify_registration("alice@example.com", code).token


def test_expired_code_drops_pending_registration(db_env, outbox):
    svc = AuthService()
    code = _register(svc, outbox)
    repo = SQLRepository()
    pending = repo.get_pending_user("alice@example.com")
    repo.upsert_pending_user(
        pending.email, pending.name, pending.password_hash, code, utcnow() - timedelta(seconds=1)
    )

    with pytest.raises(CodeInvalidError, match="OTP expired"):
        svc.verify_registration("alice@example.com", code)
    assert repo.get_pending_user("alice@example.com") is None


def test_login(db_env, outbox):
    svc = AuthService()
    svc.verify_registration("alice@example.com", _register(svc, outbox))

    result = svc.login("ALICE@example.com", "s3cret-pass")
    assert result.user["name"] == "Alice"

    with pytest.raises(InvalidCredentialsError, match="Invalid credentials."):
        svc.login("alice@example.com", "wrong-pass")
    with pytest.raises(InvalidCredentialsError, match="Invalid credentials."):
        svc.login("nobody@example.com", "s3cret-pass")


def test_logout_ends_session(db_env, outbox):
    svc = AuthService()
    token = svc.verify_registration("alice@example.com", _register(svc, outbox)).token
    svc.logout(token)
    assert user_for_token(token) is None


def test_password_reset_flow(db_env, outbox):
    svc = AuthService()
    old_token = svc.verify_registration("alice@example.com", _register(svc, outbox)).token

    assert svc.request_password_reset("alice@example.com") is True
    code = outbox[-1]["code"]
    assert outbox[-1]["purpose"] == "password reset"

    svc.verify_reset_code("alice@example.com", code)
    svc.reset_password("alice@example.com", code, "brand-new-pass")

    assert user_for_token(old_token) is None
    assert svc.login("alice@example.com", "brand-new-pass").token
    with pytest.raises(CodeInvalidError, match="Invalid or expired code."):
        svc.verify_reset_code("alice@example.com", code)


def test_password_reset_for_unknown_email_sends_nothing(db_env, outbox):
    svc = AuthService()
    assert svc.request_password_reset("ghost@example.com") is False
    assert outbox == []
    with pytest.raises(CodeInvalidError, match="Invalid or expired code."):
        svc.verify_reset_code("ghost@example.com", "1234")
