"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (one per bounded context)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from trade_assistant.core.config import settings
from trade_assistant.interfaces.health import router as health_router
from trade_assistant.interfaces.trading.dependencies import close_shared_clients
from trade_assistant.interfaces.trading.router import router as trading_router
from trade_assistant.shared.errors.handlers import register_error_handlers
from trade_assistant.shared.logging import configure_logging
from trade_assistant.shared.security.headers import SecurityHeadersMiddleware
from trade_assistant.shared.security.rate_limiting import install_rate_limiting

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: release pooled HTTP and DB clients on shutdown."""
    logger.info("%s %s starting", settings.project_name, settings.version)
    yield
    await close_shared_clients()
    logger.info("%s stopped", settings.project_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(
        level=settings.log_level,
        secrets=(
            settings.decibel_api_key,
            settings.aptos_node_api_key,
            settings.backend_wallet_private_key,
        ),
    )

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # --- Rate Limiting ---
    install_rate_limiting(app)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(trading_router, prefix="/api/v1")

    return app


app = create_app()
