import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from srf_api.core.config import Settings, get_settings
from srf_api.core.log import configure_logging
from srf_api.repositories.base import RecordStore
from srf_api.repositories.json_storage import JsonFileStore
from srf_api.routers import admin as admin_router
from srf_api.routers import forms as forms_router
from srf_api.services.admin_service import AdminService
from srf_api.services.submission_service import SubmissionService
from srf_api.services.sync_service import Mirror, SyncScheduler, SyncService

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Baseline security headers (anti clickjacking, nosniff, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def _default_mirror(settings: Settings) -> Optional[Mirror]:
    if not settings.mirror_database_url:
        return None
    from srf_api.repositories.sql_repository import MirrorRepository

    return MirrorRepository()


def _prepare_mirror(mirror: Mirror) -> None:
    ensure_schema = getattr(mirror, "ensure_schema", None)
    if ensure_schema is None:
        return
    try:
        ensure_schema()
    except Exception:
        logger.exception("Could not create the mirror tables; sync runs will fail until they exist")


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[RecordStore] = None,
    mirror: Optional[Mirror] = None,
) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``--factory``)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    store = store or JsonFileStore(settings.data_dir)
    mirror = mirror or _default_mirror(settings)
    sync_service = SyncService(store, mirror) if mirror is not None else None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.ensure_ready()
        logger.info("Data stored in: %s", getattr(store, "data_dir", "memory"))
        if not settings.admin_require_session:
            logger.warning("ADMIN_REQUIRE_SESSION is off: /admin/data is readable without logging in")
        scheduler = None
        if sync_service is not None:
            await run_in_threadpool(_prepare_mirror, sync_service.mirror)
        if sync_service is not None and settings.sync_enabled:
            scheduler = SyncScheduler(sync_service, settings.sync_interval_seconds)
            scheduler.start()
        elif sync_service is None:
            logger.info("MIRROR_DATABASE_URL not set; periodic sync disabled")
        app.state.sync_scheduler = scheduler
        try:
            yield
        finally:
            if scheduler is not None:
                await run_in_threadpool(scheduler.stop)

    app = FastAPI(title="SRF Forms API", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.submission_service = SubmissionService(store)
    app.state.admin_service = AdminService(store, settings)
    app.state.sync_service = sync_service
    app.state.sync_scheduler = None

    allowed_cors = set(settings.cors_origins)
    if settings.app_env != "prod":
        allowed_cors.update({"http://localhost:3000", "http://127.0.0.1:3000"})
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    app.include_router(forms_router.router)
    app.include_router(admin_router.router)

    @app.get("/healthz")
    def healthz(request: Request):
        svc = request.app.state.sync_service
        report = svc.last_report.as_dict() if svc is not None and svc.last_report else None
        return {
            "status": "ok",
            "sync": {
                "configured": svc is not None,
                "running": bool(svc and svc.running),
                "last_report": report,
            },
        }

    # Mounted last so it never shadows the API routes.
    if os.path.isdir(settings.public_dir):
        app.mount("/", StaticFiles(directory=settings.public_dir, html=True), name="public")

    return app


app = create_app()
