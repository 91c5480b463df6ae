"""Capability listing and debug routes"""

from fastapi import APIRouter, Depends

from discord_gateway.core.config import Settings, get_settings

router = APIRouter(tags=["info"])

ENDPOINTS = {
    "POST /send": "Send a message to Discord channel",
    "GET /auth/discord": "Start Discord OAuth2 authentication",
    "GET /auth/discord/callback": "Discord OAuth2 callback",
    "GET /auth/discord/status": "Check whether Discord OAuth2 is configured",
    "GET /env": "Check environment variables (debug)",
}


@router.get("/")
async def root(settings: Settings = Depends(get_settings)):
    """List available endpoints"""
    return {
        "message": "Discord Bot API",
        "endpoints": ENDPOINTS,
        "tokenConfigured": settings.bot_configured,
    }


# Debug only; exposes the token length and first characters
@router.get("/env")
async def env_info(settings: Settings = Depends(get_settings)):
    token = settings.discord_bot_token
    return {
        "tokenConfigured": bool(token),
        "tokenLength": len(token),
        "tokenPrefix": f"{token[:10]}..." if token else "not set",
    }
