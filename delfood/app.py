import logging

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware

from delfood.core.app_logging import configure_logging
from delfood.core.config import get_settings
from delfood.db.create_tables import create_all
from delfood.routers import owners as owners_router
from delfood.services.owner_service import OwnerAccountService, build_owner_service

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, no sniffing, no caching of account data)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Cache-Control", "no-store")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def create_app(owner_service: OwnerAccountService | None = None) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``--factory``)."""
    configure_logging()
    settings = get_settings()
    if settings.create_tables_on_startup:
        create_all()
        logger.info("Database tables ensured")

    app = FastAPI(title="Delfood Owners API")
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    app.state.owner_service = owner_service or build_owner_service()
    app.include_router(owners_router.router)
    return app
