"""
Python client for the Cardfolio API.

The editors in this package follow one pattern: load a section once, edit it
locally, and save the whole object back after re-checking the session.
"""

from .exceptions import (
    ApiError,
    MissingCredentialsError,
    NetworkError,
    ResponseShapeError,
    ServerRejectedError,
    SessionExpiredError,
)
from .session import AppSession

__all__ = [
    "ApiError",
    "AppSession",
    "MissingCredentialsError",
    "NetworkError",
    "ResponseShapeError",
    "ServerRejectedError",
    "SessionExpiredError",
]
