import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from medinfo.core.config import Settings, get_settings
from medinfo.core.logging import get_logger, set_level
from medinfo.repositories import RecordStore, get_record_store
from medinfo.repositories.errors import RecordStoreError
from medinfo.routers import admin as admin_router
from medinfo.routers import diseases as diseases_router
from medinfo.routers import pages as pages_router
from medinfo.services.catalog_service import CatalogService
from medinfo.services.session_service import AccessGate

BASE = os.path.dirname(__file__)
WEB = os.path.join(BASE, "web")
TEMPLATES = os.path.join(BASE, "templates")

logger = get_logger("app")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; img-src 'self' data:; style-src 'self'; script-src 'self'; connect-src 'self'",
        )
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"success": False, "message": message}, status_code=status_code)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code >= 500:
            logger.error("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.detail)
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return _failure(exc.status_code, message)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.errors())
        return _failure(400, "Invalid request body")

    @app.exception_handler(RecordStoreError)
    async def store_error(request: Request, exc: RecordStoreError):
        logger.error("%s %s storage failure: %s", request.method, request.url.path, exc)
        return _failure(500, "Server error")


def _cors_origins(settings: Settings) -> list[str]:
    allowed = set(settings.cors_origins)
    if settings.app_env != "prod":
        allowed.update(
            {
                f"http://localhost:{settings.port}",
                f"http://127.0.0.1:{settings.port}",
            }
        )
    return sorted(origin for origin in allowed if origin)


def create_app(settings: Settings | None = None, store: RecordStore | None = None) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``--factory``) and the tests."""
    settings = settings or get_settings()
    set_level(settings.log_level)
    store = store or get_record_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.initialize()
        yield

    app = FastAPI(title="medinfo disease catalog", lifespan=lifespan)
    app.state.settings = settings
    app.state.record_store = store
    app.state.catalog_service = CatalogService(store)
    app.state.access_gate = AccessGate(store, settings.session_ttl_seconds)
    app.state.templates = Jinja2Templates(directory=TEMPLATES)

    app.mount("/static", StaticFiles(directory=WEB), name="static")

    origins = _cors_origins(settings)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    _register_error_handlers(app)

    app.include_router(diseases_router.router)
    app.include_router(admin_router.router)
    app.include_router(pages_router.router)
    return app


app = create_app()
