import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from cardfolio.core.config import get_settings
from cardfolio.core.logs import configure_logging
from cardfolio.core.responses import envelope, error_body
from cardfolio.db.create_tables import create_all
from cardfolio.routers import about as about_router
from cardfolio.routers import admin as admin_router
from cardfolio.routers import auth as auth_router
from cardfolio.routers import blog as blog_router
from cardfolio.routers import contact as contact_router
from cardfolio.routers import navbar as navbar_router
from cardfolio.routers import pages as pages_router
from cardfolio.routers import password_reset as password_reset_router
from cardfolio.routers import portfolio as portfolio_router
from cardfolio.routers import profile as profile_router
from cardfolio.routers import resume as resume_router
from cardfolio.templating import build_environment

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; img-src 'self' data: https:; style-src 'self' 'unsafe-inline'",
        )
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


async def _http_error(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(error_body(message), status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def _validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid request: {field} {first.get('msg', '')}".strip() if field else "Invalid request"
    return JSONResponse(error_body(message, errors=jsonable_errors(errors)), status_code=422)


def jsonable_errors(errors) -> list[dict]:
    return [{"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")} for err in errors]


def create_app() -> FastAPI:
    """Build the API; uvicorn/gunicorn can call this as a factory."""
    settings = get_settings()
    configure_logging(settings.log_level)
    create_all()

    app = FastAPI(title="Cardfolio API")

    os.makedirs(settings.uploads_dir, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.uploads_dir), name="uploads")
    app.state.templates = Jinja2Templates(env=build_environment(settings.public_base_url))

    allowed_cors = {settings.public_base_url}
    if settings.app_env != "prod":
        allowed_cors.update(
            {
                "http://localhost:3000",
                "http://127.0.0.1:3000",
                "http://localhost:5173",
                "http://127.0.0.1:5173",
            }
        )
    allowed_cors = {origin for origin in allowed_cors if origin}
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)

    app.include_router(auth_router.router)
    app.include_router(password_reset_router.router)
    app.include_router(profile_router.router)
    app.include_router(about_router.router)
    app.include_router(blog_router.posts_router)
    app.include_router(blog_router.categories_router)
    app.include_router(portfolio_router.router)
    app.include_router(resume_router.router)
    app.include_router(navbar_router.router)
    app.include_router(contact_router.router)
    app.include_router(admin_router.router)
    app.include_router(pages_router.router)

    @app.get("/api/health")
    def health():
        return envelope(None, "ok")

    logger.info("Cardfolio API ready (env=%s)", settings.app_env)
    return app
