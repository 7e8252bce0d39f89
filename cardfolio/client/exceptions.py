"""
Client exception hierarchy.

- ApiError (base)
  - MissingCredentialsError: no token stored, nothing was sent
  - SessionExpiredError: the server answered 401; stored credentials are purged
  - ServerRejectedError: any other non-2xx answer, or `success: false`
  - NetworkError: the request never produced a response
  - ResponseShapeError: the body is not the expected JSON envelope
"""

from typing import Any, Optional

LOGIN_REQUIRED_MESSAGE = "Please log in to access this page"
SESSION_EXPIRED_MESSAGE = "Session expired. Please log in again."


class ApiError(Exception):
    """Base class; `message` is safe to show to the user."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Any = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_data = response_data
        self.original_error = original_error

    def __str__(self):
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class MissingCredentialsError(ApiError):
    def __init__(self, message: str = LOGIN_REQUIRED_MESSAGE):
        super().__init__(message)


class SessionExpiredError(ApiError):
    def __init__(self, message: str = SESSION_EXPIRED_MESSAGE, response_data: Any = None):
        super().__init__(message, status_code=401, response_data=response_data)


class ServerRejectedError(ApiError):
    pass


class NetworkError(ApiError):
    pass


class ResponseShapeError(ApiError):
    pass
