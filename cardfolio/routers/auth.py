from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from cardfolio.core.rate_limiter import rate_limit_ip
from cardfolio.core.responses import envelope
from cardfolio.db.models import User
from cardfolio.schemas import CodeRequest, LoginRequest, RegisterRequest
from cardfolio.services.auth_service import AuthError, AuthService, user_payload
from cardfolio.services.session_service import require_user, token_from_request

router = APIRouter(prefix="/api/auth", tags=["auth"])
auth_service = AuthService()


def _fail(exc: AuthError) -> HTTPException:
    return HTTPException(400, exc.message)


@router.post("/register")
def register(payload: RegisterRequest, request: Request):
    rate_limit_ip(request, "auth:register", limit=10, window_seconds=600)
    try:
        result = auth_service.register(payload.name, payload.email, payload.password)
    except AuthError as exc:
        raise _fail(exc) from exc
    return envelope(
        {"email": result.email, "emailSent": result.email_sent},
        "Verification code sent to your email.",
    )


@router.post("/register/verify")
def verify_registration(payload: CodeRequest, request: Request):
    rate_limit_ip(request, "auth:verify", limit=10, window_seconds=300)
    try:
        result = auth_service.verify_registration(payload.email, payload.code)
    except AuthError as exc:
        raise _fail(exc) from exc
    return envelope({"token": result.token, "user": result.user}, "Registration complete.")


@router.post("/login")
def login(payload: LoginRequest, request: Request):
    rate_limit_ip(request, "auth:login", limit=10, window_seconds=300)
    try:
        result = auth_service.login(payload.email, payload.password)
    except AuthError as exc:
        raise _fail(exc) from exc
    return envelope({"token": result.token, "user": result.user}, "Logged in.")


@router.get("/verify")
def verify(user: User = Depends(require_user)):
    return envelope({"user": user_payload(user)})


@router.post("/logout")
def logout(request: Request):
    auth_service.logout(token_from_request(request))
    return envelope(None, "Logged out.")
