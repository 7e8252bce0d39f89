"""
Authentication and identity related use cases.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from cardfolio.core.config import get_settings
from cardfolio.core.mailer import send_code_email
from cardfolio.core.security import codes_match, hash_password, new_otp_code, verify_password
from cardfolio.core.utils import as_utc, utcnow
from cardfolio.db.models import User
from cardfolio.repositories.sql_repository import SQLRepository
from cardfolio.services.session_service import delete_session, issue_session

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
CODE_RE = re.compile(r"^\d{4}$")
MIN_PASSWORD_LENGTH = 8
RESET_REQUESTED_MESSAGE = "If this email is registered, a code has been sent."


class AuthError(Exception):
    """Base class for authentication-related exceptions; `message` is user facing."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RegistrationError(AuthError):
    pass


class AccountExistsError(RegistrationError):
    def __init__(self, message: str = "User already exists."):
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    def __init__(self, message: str = "Invalid credentials."):
        super().__init__(message)


class CodeInvalidError(AuthError):
    pass


def user_payload(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role or "user",
        "isPremium": bool(user.is_premium),
    }


@dataclass
class RegisterResult:
    email: str
    email_sent: bool


@dataclass
class LoginSuccess:
    token: str
    user: dict


@dataclass
class AuthService:
    """Handles registration, login, verification and password reset flows."""

    def __post_init__(self):
        self.repository = SQLRepository()

    @property
    def settings(self):
        return get_settings()

    # -------------------------------------- helpers --------------------------------------
    def _code_expiry(self):
        return utcnow() + timedelta(seconds=max(60, self.settings.otp_ttl_seconds))

    def _ttl_minutes(self) -> int:
        return max(1, self.settings.otp_ttl_seconds // 60)

    @staticmethod
    def _normalize_email(email: str) -> str:
        return (email or "").strip().lower()

    @staticmethod
    def _check_code_format(code: str) -> str:
        code = (code or "").strip()
        if not CODE_RE.match(code):
            raise CodeInvalidError("OTP code must be exactly 4 digits.")
        return code

    @staticmethod
    def _check_password(password: str) -> None:
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise RegistrationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")

    # ------------------------------------ registration ------------------------------------
    def register(self, name: str, email: str, password: str) -> RegisterResult:
        name = (name or "").strip()
        email = self._normalize_email(email)
        if not (name and email and password):
            raise RegistrationError("Name, email and password are required.")
        if not EMAIL_RE.match(email):
            raise RegistrationError("Invalid email format.")
        self._check_password(password)
        if self.repository.get_user_by_email(email):
            raise AccountExistsError()
        code = new_otp_code()
        self.repository.upsert_pending_user(email, name, hash_password(password), code, self._code_expiry())
        sent = send_code_email(email, "Verify your account", "verification", code, self._ttl_minutes())
        logger.info("registration pending for %s (email sent: %s)", email, sent)
        return RegisterResult(email=email, email_sent=sent)

    def verify_registration(self, email: str, code: str) -> LoginSuccess:
        email = self._normalize_email(email)
        if not email:
            raise CodeInvalidError("Email and code are required.")
        code = self._check_code_format(code)
        pending = self.repository.get_pending_user(email)
        if not pending:
            raise CodeInvalidError("No pending registration for this email.")
        if as_utc(pending.otp_expires_at) < utcnow():
            self.repository.delete_pending_user(email)
            raise CodeInvalidError("OTP expired. Please register again.")
        if not codes_match(pending.otp_code, code):
            raise CodeInvalidError("Invalid OTP.")
        if self.repository.get_user_by_email(email):
            self.repository.delete_pending_user(email)
            raise AccountExistsError()
        user = self.repository.create_user(pending.name, email, pending.password_hash)
        self.repository.delete_pending_user(email)
        logger.info("account created for %s", email)
        return LoginSuccess(token=issue_session(user.id), user=user_payload(user))

    # ---------------------------------------- login ----------------------------------------
    def login(self, email: str, password: str) -> LoginSuccess:
        email = self._normalize_email(email)
        if not (email and password):
            raise InvalidCredentialsError("Email and password are required.")
        user = self.repository.get_user_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()
        return LoginSuccess(token=issue_session(user.id), user=user_payload(user))

    def logout(self, token: Optional[str]) -> None:
        delete_session(token)

    # ------------------------------------ password reset ------------------------------------
    def request_password_reset(self, email: str) -> bool:
        """Issue a reset code when the account exists; callers never learn which."""
        email = self._normalize_email(email)
        if not email:
            raise AuthError("Email is required.")
        user = self.repository.get_user_by_email(email)
        if not user:
            logger.info("password reset requested for unknown email")
            return False
        code = new_otp_code()
        self.repository.upsert_password_reset(user.id, code, self._code_expiry())
        return send_code_email(email, "Password reset code", "password reset", code, self._ttl_minutes())

    def _checked_reset(self, email: str, code: str) -> User:
        email = self._normalize_email(email)
        code = self._check_code_format(code)
        user = self.repository.get_user_by_email(email) if email else None
        reset = self.repository.get_password_reset(user.id) if user else None
        if not user or not reset:
            raise CodeInvalidError("Invalid or expired code.")
        if as_utc(reset.expires_at) < utcnow():
            self.repository.delete_password_reset(user.id)
            raise CodeInvalidError("Invalid or expired code.")
        if not codes_match(reset.code, code):
            raise CodeInvalidError("Invalid or expired code.")
        return user

    def verify_reset_code(self, email: str, code: str) -> None:
        self._checked_reset(email, code)

    def reset_password(self, email: str, code: str, new_password: str) -> None:
        self._check_password(new_password)
        user = self._checked_reset(email, code)
        self.repository.update_user_password(user.id, hash_password(new_password))
        self.repository.delete_password_reset(user.id)
        self.repository.delete_user_sessions(user.id)
        logger.info("password reset for user %s", user.id)
