"""Zora Agent — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - /dev routes only exist outside production
    - The container (repositories, providers, services) is built once, in the
      lifespan, unless one was already placed on app.state
    - Demo cards are seeded only when the card file does not exist yet
    - The refresh job starts after seeding and is cancelled on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - create_app(settings) factory so tests build apps with their own settings;
      `app` is the module-level instance uvicorn serves
"""

import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from zora_agent.api.error_handlers import register_error_handlers
from zora_agent.api.routes import analytics, auth, billing, dev_tools, health, pages
from zora_agent.config import Settings, get_settings
from zora_agent.infrastructure.observability import setup_logging
from zora_agent.services.container import build_container

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("zora_agent.access")

STATIC_DIR = "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    container = getattr(app.state, "container", None)
    if container is None:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        container = build_container(settings)
        app.state.container = container
    container.seed_demo_data()
    if settings.analytics_job_enabled:
        container.refresh_job.start()
    logger.info(f"Zora Agent started ({settings.environment})")
    yield
    logger.info("Zora Agent shutting down")
    await container.aclose()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Zora Agent", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings

    register_error_handlers(app)
    _register_access_log(app)

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        max_age=settings.session_max_age_seconds,
        same_site="lax",
        https_only=settings.is_production,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(pages.router)
    app.include_router(auth.router)
    app.include_router(billing.router)
    app.include_router(analytics.router)
    if not settings.is_production:
        app.include_router(dev_tools.router)

    # Mounted after routes so page and API paths take precedence
    if os.path.isdir(STATIC_DIR):
        app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
    return app


def _register_access_log(app: FastAPI) -> None:
    @app.middleware("http")
    async def access_log(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        access_logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - start) * 1000, 1),
                "user_id": getattr(request.state, "user_id", None),
            },
        )
        return response


app = create_app()
