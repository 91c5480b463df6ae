"""FastAPI application factory"""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from discord_gateway import __version__
from discord_gateway.core.config import get_settings
from discord_gateway.core.dependencies import close_discord_api
from discord_gateway.core.errors import GatewayError, gateway_error_handler
from discord_gateway.core.logging import setup_logging
from discord_gateway.routers import auth_router, info_router, messages_router

logger = logging.getLogger(__name__)

# Track server start time
_start_time: float = 0.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle startup and shutdown"""
    global _start_time
    _start_time = time.time()

    settings = get_settings()

    logger.info("Starting Discord Gateway")
    logger.info(f"Environment: {settings.environment}")
    if not settings.bot_configured:
        logger.warning("DISCORD_BOT_TOKEN is not set, /send will fail")
    if not settings.oauth_configured:
        logger.warning("Discord OAuth2 credentials are incomplete, login will fail")

    yield

    logger.info("Shutting down Discord Gateway")
    try:
        await close_discord_api()
    except Exception as e:
        logger.exception(f"Error during shutdown: {e}")


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    settings = get_settings()

    # Setup logging first
    setup_logging(settings)

    app = FastAPI(
        title="Discord Gateway",
        description="Discord bot message relay and Discord OAuth2 login",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(GatewayError, gateway_error_handler)  # type: ignore[arg-type]

    # Register routers
    app.include_router(info_router.router)
    app.include_router(messages_router.router)
    app.include_router(auth_router.router)

    # Liveness probe, no outbound calls
    @app.get("/health")
    async def health():
        """Liveness check for Docker / K8s"""
        return {
            "status": "healthy",
            "uptime_seconds": int(time.time() - _start_time),
        }

    @app.api_route("/ping", methods=["GET", "HEAD"], response_class=PlainTextResponse)
    async def ping():
        """Ping endpoint"""
        return "pong"

    logger.info("FastAPI application configured")

    return app
