"""Dependency injection utilities for FastAPI"""

import logging

from discord_gateway.core.config import get_settings
from discord_gateway.services import (
    CookieStateStore,
    DiscordAPIClient,
    MemoryStateStore,
    OAuthStateStore,
)

logger = logging.getLogger(__name__)


_discord_api: DiscordAPIClient | None = None


def get_discord_api() -> DiscordAPIClient:
    """Get shared DiscordAPIClient singleton (connection reuse)."""
    global _discord_api
    if _discord_api is None:
        settings = get_settings()
        _discord_api = DiscordAPIClient(
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            redirect_uri=settings.redirect,
            timeout=settings.http_timeout,
        )
    return _discord_api


async def close_discord_api() -> None:
    """Close the shared DiscordAPIClient. Call on app shutdown."""
    global _discord_api
    if _discord_api is not None:
        await _discord_api.close()
        _discord_api = None


_state_store: OAuthStateStore | None = None


def get_state_store() -> OAuthStateStore:
    """Get the OAuth state store selected by OAUTH_STATE_STORE"""
    global _state_store
    if _state_store is None:
        settings = get_settings()
        if settings.oauth_state_store == "memory":
            _state_store = MemoryStateStore(
                ttl=settings.oauth_state_ttl,
                maxsize=settings.oauth_state_max_pending,
            )
        else:
            _state_store = CookieStateStore()
        logger.info(f"OAuth state store: {settings.oauth_state_store}")
    return _state_store
