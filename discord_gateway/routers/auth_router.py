"""Discord OAuth2 routes"""

import logging

from fastapi import APIRouter, Cookie, Depends
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel

from discord_gateway.core.config import Settings, get_settings
from discord_gateway.core.dependencies import get_discord_api, get_state_store
from discord_gateway.core.errors import (
    AuthError,
    AuthProviderError,
    ConfigError,
    GatewayError,
    InternalError,
    ValidationError,
)
from discord_gateway.services import STATE_COOKIE, DiscordAPIClient, OAuthStateStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"])


class DiscordOAuthStatusResponse(BaseModel):
    enabled: bool
    message: str


@router.get("/auth/discord/status", response_model=DiscordOAuthStatusResponse)
async def get_discord_oauth_status(
    settings: Settings = Depends(get_settings),
) -> DiscordOAuthStatusResponse:
    """Check if Discord OAuth is configured and available"""
    if settings.oauth_configured:
        return DiscordOAuthStatusResponse(
            enabled=True,
            message="Discord OAuth is available",
        )
    return DiscordOAuthStatusResponse(
        enabled=False,
        message="Discord OAuth is not configured",
    )


@router.get("/auth/discord")
async def start_discord_oauth(
    discord_api: DiscordAPIClient = Depends(get_discord_api),
    state_store: OAuthStateStore = Depends(get_state_store),
    settings: Settings = Depends(get_settings),
) -> RedirectResponse:
    """Issue a CSRF state, bind it to the browser and redirect to Discord"""
    if not settings.client_id or not settings.redirect:
        raise ConfigError("CLIENT_ID or REDIRECT is not configured")

    try:
        state = await state_store.issue()
        oauth_url = discord_api.generate_oauth_url(state=state)
    except Exception as e:
        logger.exception(f"Failed to generate OAuth2 URL: {e}")
        raise InternalError("Failed to generate OAuth2 URL", details=str(e)) from e

    response = RedirectResponse(url=oauth_url, status_code=302)
    # Session cookie; the callback compares it with the returned state
    response.set_cookie(
        key=STATE_COOKIE,
        value=state,
        httponly=True,
        samesite="lax",
        path="/",
    )
    return response


@router.get("/auth/discord/callback")
@router.get("/discord/redirect")
async def discord_oauth_callback(
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    oauth_state: str | None = Cookie(None),
    discord_api: DiscordAPIClient = Depends(get_discord_api),
    state_store: OAuthStateStore = Depends(get_state_store),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Handle Discord OAuth callback"""
    try:
        if error:
            logger.error(f"OAuth error from Discord: {error}")
            raise AuthProviderError("OAuth2 authentication failed", details=error)

        if not code or not state:
            raise ValidationError("Missing code or state parameter")

        if not await state_store.verify(state, oauth_state):
            logger.warning("OAuth state mismatch")
            raise AuthError("Invalid state parameter")

        if not settings.oauth_configured:
            raise ConfigError("OAuth2 credentials are not configured")

        token = await discord_api.exchange_code_for_token(code)
        user = await discord_api.get_current_user(token.access_token)

    except GatewayError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error in Discord OAuth callback: {e}")
        raise InternalError("Internal server error", details=str(e)) from e

    logger.info(f"Discord user authenticated: {user.username} ({user.id})")

    response = JSONResponse(
        content={
            "success": True,
            "message": "Authentication successful",
            "user": user.model_dump(exclude_unset=True),
            # TODO: drop the raw access token once callers stop relying on it
            "token": token.model_dump(exclude_unset=True),
        }
    )
    response.delete_cookie(key=STATE_COOKIE, path="/", httponly=True, samesite="lax")
    return response
