"""
Six Cities Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers, the controllers'
       routes, the health route and the static upload directory.
Who:   uvicorn (`uvicorn sixcities.main:app`) and the test suite, which passes
       its own Services to create_app().

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                       FastAPI App                        │
    │                                                          │
    │  ASGI Middleware:  Request ID → Logging → GZip → CORS    │
    │                                                          │
    │  Controllers (route pipeline per request):               │
    │    /offers/*   /users/*   /comments/*                    │
    │      context → middleware chain → handler → response     │
    │                     └── any failure → error mapper       │
    │                                                          │
    │  Plain routes:  GET /health     Static:  /upload/*       │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check, upload directory
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles

from sixcities import __version__
from sixcities.composition import Services, build_controllers, build_services
from sixcities.config import STATIC_UPLOAD_ROUTE, settings
from sixcities.database import async_session_factory, dispose_engine
from sixcities.middleware.logging import RequestLoggingMiddleware
from sixcities.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from sixcities.rest.application import RestApplication
from sixcities.rest.error_mapper import register_exception_handlers
from sixcities.routes import health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once at startup.

    Format: 2024-01-15T12:00:00 [INFO] sixcities.access: GET /offers 200 4.2ms [a1b2c3d4] ...
    Output goes to stdout, which Docker captures.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Six Cities Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Not fatal: the health endpoint stays reachable and reports the state
        logger.error("Configuration error: %s", str(e))

    logger.info("Database host: %s", settings.database_host)
    logger.info("Upload directory: %s", Path(settings.upload_directory).resolve())
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Six Cities Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(services: Optional[Services] = None) -> FastAPI:
    """
    Build a fully wired application.

    Args:
        services: Pre-built service graph. Defaults to the real services over
                  the module-level session factory.
    """
    app = FastAPI(
        title="Six Cities API",
        description="Rental offers, users, comments and favorites.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Middleware ────────────────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Exception Handlers ────────────────────────────────────────────────
    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    if services is None:
        services = build_services(settings, async_session_factory)
    app.state.services = services

    RestApplication(build_controllers(services, settings)).mount(app)
    app.include_router(health.router)

    # ── Static uploads ────────────────────────────────────────────────────
    upload_directory = Path(settings.upload_directory)
    upload_directory.mkdir(parents=True, exist_ok=True)
    app.mount(
        STATIC_UPLOAD_ROUTE,
        StaticFiles(directory=str(upload_directory)),
        name="upload",
    )

    return app


# Module-level app instance for uvicorn
app = create_app()
