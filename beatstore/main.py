"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from beatstore.api.middleware.error_handler import error_handler_middleware
from beatstore.api.middleware.latency_logging import latency_logging_middleware
from beatstore.api.middleware.request_timeout import request_timeout_middleware
from beatstore.api.routes import admin, checkout, health, webhooks
from beatstore.core.config import get_settings
from beatstore.core.keep_alive import init_keep_alive, shutdown_keep_alive
from beatstore.core.stripe import configure_stripe
from beatstore.core.supabase import check_database_connection
from beatstore.services.catalog_service import CATALOG

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control back to the application.
    """
    # Startup
    settings = get_settings()
    logger.info("Starting %s in %s mode", settings.app_name, settings.app_env)

    configure_stripe()

    # The service still takes checkouts without a database; orders are then lost
    db_result = await check_database_connection()
    if db_result["healthy"]:
        logger.info("Database connected")
    else:
        logger.error("Database unreachable, continuing without it: %s", db_result.get("error"))

    if settings.keep_alive_enabled:
        await init_keep_alive()
    else:
        logger.info("Keep-alive disabled")

    logger.info("Frontend: %s", settings.frontend_url)
    logger.info("Products loaded: %d", len(CATALOG))

    yield
    # Shutdown
    await shutdown_keep_alive()
    logger.info("Shutting down %s", settings.app_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Beatstore API",
        description="Checkout, order reconciliation and fulfillment for a digital beat store",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # Innermost first: the last middleware added wraps all the others
    app.add_middleware(BaseHTTPMiddleware, dispatch=request_timeout_middleware)
    app.add_middleware(BaseHTTPMiddleware, dispatch=latency_logging_middleware)
    app.add_middleware(BaseHTTPMiddleware, dispatch=error_handler_middleware)

    # CORS outermost so error responses carry the headers too
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_router = APIRouter(prefix="/api")
    api_router.include_router(health.router)
    api_router.include_router(webhooks.router)
    api_router.include_router(checkout.router)
    app.include_router(api_router)

    # Operator routes, bearer-token protected
    app.include_router(admin.router)

    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "beatstore.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
