from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from cardfolio.core.rate_limiter import rate_limit_ip
from cardfolio.core.responses import envelope
from cardfolio.schemas import CodeRequest, EmailRequest, ResetPasswordRequest
from cardfolio.services.auth_service import RESET_REQUESTED_MESSAGE, AuthError, AuthService

router = APIRouter(prefix="/api/password-reset", tags=["auth"])
auth_service = AuthService()


@router.post("/request")
def request_reset(payload: EmailRequest, request: Request):
    rate_limit_ip(request, "auth:forgot", limit=5, window_seconds=300)
    try:
        auth_service.request_password_reset(payload.email)
    except AuthError as exc:
        raise HTTPException(400, exc.message) from exc
    return envelope(None, RESET_REQUESTED_MESSAGE)


@router.post("/verify-code")
def verify_code(payload: CodeRequest, request: Request):
    rate_limit_ip(request, "auth:reset-code", limit=10, window_seconds=300)
    try:
        auth_service.verify_reset_code(payload.email, payload.code)
    except AuthError as exc:
        raise HTTPException(400, exc.message) from exc
    return envelope(None, "Code verified.")


@router.post("/reset-password")
def reset_password(payload: ResetPasswordRequest, request: Request):
    rate_limit_ip(request, "auth:reset", limit=5, window_seconds=300)
    try:
        auth_service.reset_password(payload.email, payload.code, payload.new_password)
    except AuthError as exc:
        raise HTTPException(400, exc.message) from exc
    return envelope(None, "Password has been reset. Please log in.")
