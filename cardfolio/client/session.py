"""Application session: credential store, API client and notifier in one object."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

from .config import get_client_settings
from .exceptions import ApiError, MissingCredentialsError, ResponseShapeError, SessionExpiredError
from .http import ApiClient
from .notifications import Notifier
from .storage import CredentialStore

logger = logging.getLogger(__name__)


class AppSession:
    """Passed explicitly to every editor instead of a global auth context."""

    def __init__(
        self,
        store: Optional[CredentialStore] = None,
        *,
        base_url: Optional[str] = None,
        http_session: Any = None,
        notifier: Optional[Notifier] = None,
        timeout: Optional[float] = None,
    ):
        if store is None:
            store = CredentialStore(os.path.join(get_client_settings().home_dir, "credentials.json"))
        self.store = store
        self.api = ApiClient(store, base_url=base_url, session=http_session, timeout=timeout)
        self.notifier = notifier or Notifier()

    # ------------------------------------------------------------------ state
    @property
    def token(self) -> Optional[str]:
        return self.store.token

    @property
    def user(self) -> Optional[dict]:
        return self.store.user

    @property
    def user_id(self) -> Optional[str]:
        return (self.user or {}).get("id")

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def is_premium(self) -> bool:
        return bool((self.user or {}).get("isPremium"))

    # ------------------------------------------------------------------ auth calls
    def register(self, name: str, email: str, password: str) -> dict:
        envelope = self.api.post(
            "/api/auth/register", {"name": name, "email": email, "password": password}, auth=False
        )
        return envelope.data or {}

    def verify_registration(self, email: str, code: str) -> dict:
        envelope = self.api.post("/api/auth/register/verify", {"email": email, "code": code}, auth=False)
        return self._remember(envelope.data)

    def login(self, email: str, password: str) -> dict:
        envelope = self.api.post("/api/auth/login", {"email": email, "password": password}, auth=False)
        return self._remember(envelope.data)

    def _remember(self, data: Any) -> dict:
        if not isinstance(data, dict) or not data.get("token") or not isinstance(data.get("user"), dict):
            raise ResponseShapeError("Login response is missing token or user")
        self.store.save_login(data["token"], data["user"])
        return data["user"]

    def verify(self) -> dict:
        """Ask the server who owns the stored token; raises on any failure."""
        envelope = self.api.get("/api/auth/verify")
        user = (envelope.data or {}).get("user") if isinstance(envelope.data, dict) else None
        if isinstance(user, dict):
            self.store.set("user", user)
        return user or {}

    def check_auth(self) -> bool:
        try:
            self.verify()
        except (MissingCredentialsError, SessionExpiredError):
            return False
        return True

    def logout(self) -> None:
        if self.token:
            try:
                self.api.post("/api/auth/logout")
            except ApiError as exc:
                logger.info("logout request failed, clearing local session anyway: %s", exc.message)
        self.store.purge()
