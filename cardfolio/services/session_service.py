"""Session helpers (issue tokens, header lookup, validation)."""
from __future__ import annotations

import logging
from datetime import timedelta

from fastapi import HTTPException, Request

from cardfolio.core.config import get_settings
from cardfolio.core.security import new_session_token
from cardfolio.core.utils import as_utc, utcnow
from cardfolio.db.models import User, UserSession
from cardfolio.db.session import get_session

AUTH_HEADER = "x-auth-token"

logger = logging.getLogger(__name__)


def issue_session(user_id: str) -> str:
    """Create a new session token and persist it in the SQL store."""
    token = new_session_token()
    settings = get_settings()
    ttl = max(60, settings.session_ttl_seconds)
    expires_at = utcnow() + timedelta(seconds=ttl)

    with get_session() as session:
        session.add(UserSession(token=token, user_id=user_id, expires_at=expires_at))
        session.commit()
    return token


def user_for_token(token: str | None) -> User | None:
    """Return the user owning a live session token, dropping expired ones."""
    if not token:
        return None
    with get_session() as session:
        db_session = session.get(UserSession, token)
        if not db_session:
            return None
        if db_session.expires_at and as_utc(db_session.expires_at) < utcnow():
            session.delete(db_session)
            session.commit()
            logger.info("expired session dropped for user %s", db_session.user_id)
            return None
        return session.get(User, db_session.user_id)


def token_from_request(request: Request) -> str | None:
    return (request.headers.get(AUTH_HEADER) or "").strip() or None


def current_user(request: Request) -> User | None:
    return user_for_token(token_from_request(request))


def require_user(request: Request) -> User:
    """FastAPI dependency: the authenticated user or 401."""
    token = token_from_request(request)
    if not token:
        raise HTTPException(401, "No token, authorization denied")
    user = user_for_token(token)
    if not user:
        raise HTTPException(401, "Token is not valid")
    return user


def require_admin(request: Request) -> User:
    user = require_user(request)
    if (user.role or "") != "admin":
        raise HTTPException(403, "Admin access required")
    return user


def delete_session(token: str | None) -> None:
    """Remove a session token from the store."""
    if not token:
        return
    with get_session() as session:
        entity = session.get(UserSession, token)
        if entity:
            session.delete(entity)
            session.commit()
