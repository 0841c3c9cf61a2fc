import os
from contextlib import asynccontextmanager

import sentry_sdk
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.starlette import StarletteIntegration
from slowapi.errors import RateLimitExceeded
from starlette.middleware.cors import CORSMiddleware

from app.api import errors
from app.api.deps import _uow_factory
from app.api.routers.auth import router as auth_router
from app.api.routers.contacts import router as contacts_router
from app.api.routers.dashboard import router as dashboard_router
from app.api.routers.equipment import router as equipment_router
from app.api.routers.exercises import router as exercises_router
from app.api.routers.healthz import router as healthz_router
from app.api.routers.notifications import router as notifications_router
from app.api.routers.processes import router as processes_router
from app.api.routers.readyz import router as readyz_router
from app.api.routers.reports import router as reports_router
from app.api.routers.settings import router as settings_router
from app.api.routers.users import router as users_router
from app.api.routers.workshops import router as workshops_router
from app.core.config import get_settings
from app.logging import setup_logging
from app.middleware.rate_limit import limiter, rate_limit_middleware
from app.middleware.request_id import request_id_middleware
from app.middleware.security_headers import security_headers_middleware
from app.services.catalog import get_catalog
from app.services.events import EventBus
from app.services.notification import EmailNotifier


def _init_sentry(env: str) -> None:
    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        return
    # traces_sample_rate: clamp to [0.0, 0.2]
    try:
        rate_raw = float(os.getenv("SENTRY_TRACES_RATE", "0"))
    except ValueError:
        rate_raw = 0.0
    sentry_sdk.init(
        dsn=dsn,
        environment=env,
        release=os.getenv("RELEASE"),
        integrations=[StarletteIntegration()],
        traces_sample_rate=max(0.0, min(0.2, rate_raw)),
        send_default_pii=False,
    )


def create_app() -> FastAPI:
    setup_logging()
    settings = get_settings()
    env = os.getenv("APP_ENV", settings.app_env)
    _init_sentry(env)

    # Fail fast on a malformed catalog rather than on the first booking
    get_catalog()

    events = EventBus()
    if settings.notifications_enabled:
        EmailNotifier(_uow_factory).register(events)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # Let in-flight notification emails finish before shutdown
        await app.state.events.drain()

    app = FastAPI(title="Workshop Operations API", lifespan=lifespan)
    app.state.events = events
    app.state.limiter = limiter

    app.middleware("http")(request_id_middleware)
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(rate_limit_middleware)

    allow_origins = [o.strip() for o in os.getenv("ALLOW_ORIGINS", "").split(",") if o.strip()]
    if allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allow_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
            allow_headers=["*"],
        )

    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(exercises_router)
    app.include_router(processes_router)
    app.include_router(contacts_router)
    app.include_router(workshops_router)
    app.include_router(equipment_router)
    app.include_router(reports_router)
    app.include_router(notifications_router)
    app.include_router(settings_router)
    app.include_router(dashboard_router)
    app.include_router(healthz_router)
    app.include_router(readyz_router)
    errors.install(app)

    @app.get("/health")
    def health():
        return {"status": "ok", "env": env}

    @app.exception_handler(RateLimitExceeded)
    async def _rate_limit_handler(request: Request, exc: RateLimitExceeded):  # type: ignore[unused-ignore]
        info = getattr(request.state, "rate_limit_info", None) or {
            "method": request.method,
            "key": (request.client.host if request.client else None) or "-",
            "limit": str(exc.detail),
        }
        return JSONResponse(
            status_code=429,
            content={"error": {"code": "rate_limited", "message": "Too Many Requests", "detail": info}},
        )

    structlog.get_logger(__name__).info(
        "app_startup",
        env=env,
        notifications=settings.notifications_enabled,
        exercises=len(get_catalog().list_exercises()),
    )
    return app


app = create_app()
