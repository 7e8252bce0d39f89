"""Persistent credential store (the token and the logged-in user)."""

from __future__ import annotations

import json
import logging
import os
import threading
from typing import Any, Optional

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class CredentialStore:
    """Key/value store kept in a JSON file; `path=None` keeps it in memory."""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._lock = threading.Lock()
        self._data: dict[str, Any] = self._read()

    def _read(self) -> dict:
        if not self.path or not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            logger.warning("credential store %s unreadable, starting empty: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self) -> None:
        if not self.path:
            return
        os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
        tmp = f"{self.path}.tmp"
        with open(tmp, "w", encoding="utf-8") as fh:
            json.dump(self._data, fh)
        os.replace(tmp, self.path)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value
            self._write()

    def remove(self, *keys: str) -> None:
        with self._lock:
            for key in keys:
                self._data.pop(key, None)
            self._write()

    @property
    def token(self) -> Optional[str]:
        return self.get(TOKEN_KEY) or None

    @property
    def user(self) -> Optional[dict]:
        return self.get(USER_KEY) or None

    def save_login(self, token: str, user: dict) -> None:
        with self._lock:
            self._data[TOKEN_KEY] = token
            self._data[USER_KEY] = user
            self._write()

    def purge(self) -> None:
        """Forget the session (token and user)."""
        self.remove(TOKEN_KEY, USER_KEY)
