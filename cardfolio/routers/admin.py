from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from cardfolio.core.responses import envelope
from cardfolio.db.models import User
from cardfolio.repositories.sql_repository import SQLRepository
from cardfolio.schemas import PremiumRequest
from cardfolio.services.auth_service import user_payload
from cardfolio.services.session_service import require_admin

router = APIRouter(prefix="/api/admin", tags=["admin"])
_repo = SQLRepository()

logger = logging.getLogger(__name__)


@router.get("/users")
def list_users(admin: User = Depends(require_admin)):
    return envelope([user_payload(u) for u in _repo.list_users()])


@router.put("/users/{user_id}/premium")
def set_premium(user_id: str, payload: PremiumRequest, admin: User = Depends(require_admin)):
    user = _repo.set_user_premium(user_id, payload.is_premium)
    if not user:
        raise HTTPException(404, "User not found")
    logger.info("admin %s set premium=%s for %s", admin.id, payload.is_premium, user_id)
    return envelope(user_payload(user), "User updated successfully")
