"""
HTTP layer: adds the auth header, classifies failures and validates the
response envelope before anything reaches an editor.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests
from pydantic import ValidationError

from cardfolio.schemas import Envelope

from .config import get_client_settings
from .exceptions import (
    MissingCredentialsError,
    NetworkError,
    ResponseShapeError,
    ServerRejectedError,
    SessionExpiredError,
)
from .storage import CredentialStore

logger = logging.getLogger(__name__)

AUTH_HEADER = "x-auth-token"


class ApiClient:
    """Thin wrapper over a requests-compatible session.

    Any object with ``request(method, url, headers=, json=, files=)`` returning
    a response with ``status_code`` and ``json()`` works, which is how tests
    drive the client against an in-process app.
    """

    def __init__(
        self,
        store: CredentialStore,
        base_url: Optional[str] = None,
        session: Any = None,
        timeout: Optional[float] = None,
    ):
        settings = get_client_settings()
        self.store = store
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout if timeout is not None else (settings.request_timeout if session is None else None)

    def url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def asset_url(self, path: Optional[str]) -> str:
        """Server-relative upload paths are rendered against the backend origin."""
        if not path:
            return ""
        return self.url(path) if path.startswith("/") else path

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        files: Optional[dict] = None,
        auth: bool = True,
    ) -> Envelope:
        headers = {"Accept": "application/json"}
        if auth:
            token = self.store.token
            if not token:
                raise MissingCredentialsError()
            headers[AUTH_HEADER] = token
        kwargs: dict[str, Any] = {"headers": headers}
        if json is not None:
            kwargs["json"] = json
        if files is not None:
            kwargs["files"] = files
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        url = self.url(path)
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise NetworkError(f"Network error: {exc}", original_error=exc) from exc
        return self._handle(method, url, response)

    def _handle(self, method: str, url: str, response: Any) -> Envelope:
        status = response.status_code
        try:
            body = response.json()
        except ValueError as exc:
            if 200 <= status < 300:
                raise ResponseShapeError("Unexpected response from server", status, original_error=exc) from exc
            body = None
        if status == 401:
            # any 401 ends the session, whatever the route
            self.store.purge()
            logger.info("%s %s returned 401; credentials purged", method, url)
            raise SessionExpiredError(response_data=body)
        if not 200 <= status < 300:
            message = body.get("message") if isinstance(body, dict) else None
            raise ServerRejectedError(message or f"HTTP error! status: {status}", status, body)
        try:
            envelope = Envelope.model_validate(body)
        except ValidationError as exc:
            raise ResponseShapeError("Unexpected response from server", status, body, exc) from exc
        if not envelope.success:
            raise ServerRejectedError(envelope.message or "Request failed", status, body)
        return envelope

    def get(self, path: str, **kwargs) -> Envelope:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, json: Any = None, **kwargs) -> Envelope:
        return self.request("POST", path, json=json, **kwargs)

    def put(self, path: str, json: Any = None, **kwargs) -> Envelope:
        return self.request("PUT", path, json=json, **kwargs)

    def patch(self, path: str, json: Any = None, **kwargs) -> Envelope:
        return self.request("PATCH", path, json=json, **kwargs)

    def delete(self, path: str, **kwargs) -> Envelope:
        return self.request("DELETE", path, **kwargs)

    def upload(self, path: str, field: str, filename: str, data: bytes, content_type: str) -> Envelope:
        return self.request("POST", path, files={field: (filename, data, content_type)})

    def close(self) -> None:
        close = getattr(self.session, "close", None)
        if close and isinstance(self.session, requests.Session):
            close()
