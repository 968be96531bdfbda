"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (schema, engine disposal).
Middleware, CORS, error handlers and routers are all registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from pressroom import __version__
from pressroom.api import api_router
from pressroom.auth.jwt import TokenIssuer
from pressroom.config import Settings, settings
from pressroom.errors import (
    AppError,
    app_error_handler,
    request_validation_handler,
    unhandled_error_handler,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs
    at shutdown.
    """
    from pressroom.db.engine import create_schema, engine

    logger.info(
        "pressroom.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    if settings.auto_create_schema:
        await create_schema()
        logger.info("pressroom.schema_ready")

    yield

    logger.info("pressroom.shutdown")
    await engine.dispose()


def create_app(config: Settings | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Builds a TokenIssuer up front so missing signing secrets raise
    ConfigurationError here instead of on the first auth request.
    """
    config = config or settings
    TokenIssuer(config)

    app = FastAPI(
        title="Pressroom",
        description="Accounts, sessions and mailing list for a publication site",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler

    from pressroom.middleware.request_id import RequestIdMiddleware
    from pressroom.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,  # the refresh cookie must cross origins in dev
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    # ── Error envelope ────────────────────────────────────────
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: pressroom.main:app)
app = create_app()
