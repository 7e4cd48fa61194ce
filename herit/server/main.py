"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware
(CORS, request monitoring), registers exception handlers and includes all
API routers under ``/api``.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from herit.core.database import init_db
from herit.core.logging_config import get_logger, setup_logging
from herit.core.monitoring import initialize_logfire

from .api.v1 import assets, audit, auth, beneficiaries, health, onboarding, rules
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates missing tables (when ``DATABASE_AUTO_CREATE`` is on) and sets up
    Logfire on startup.
    """
    try:
        logger.info(f"Starting up Herit API ({settings.environment})...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    initialize_logfire(app)

    yield

    logger.info("Shutting down Herit API...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Herit API

    Backend for the Herit estate-planning application: account sessions and
    Google sign-in, the onboarding flow, and the user's assets and beneficiaries.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_PREFIX}/openapi.json",
    docs_url=f"{constant.API_PREFIX}/docs",
    redoc_url=f"{constant.API_PREFIX}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)

app.include_router(health.router, prefix=constant.API_PREFIX, tags=["health"])
app.include_router(auth.router, prefix=f"{constant.API_PREFIX}/auth", tags=["auth"])
app.include_router(onboarding.router, prefix=f"{constant.API_PREFIX}/onboarding", tags=["onboarding"])
app.include_router(assets.router, prefix=f"{constant.API_PREFIX}/assets", tags=["assets"])
app.include_router(beneficiaries.router, prefix=f"{constant.API_PREFIX}/beneficiaries", tags=["beneficiaries"])
app.include_router(rules.router, prefix=f"{constant.API_PREFIX}/rules", tags=["rules"])
app.include_router(audit.router, prefix=f"{constant.API_PREFIX}/audit", tags=["audit"])


def run() -> None:
    """Serve the API with uvicorn using ``HERIT_SERVER_HOST`` / ``HERIT_SERVER_PORT``."""
    uvicorn.run(
        "herit.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
