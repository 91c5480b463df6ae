"""Discord API client service"""

import logging
from typing import Any
from urllib.parse import quote, urlencode

import httpx
from pydantic import BaseModel, ConfigDict

from discord_gateway.core.errors import ProfileFetchError, TokenExchangeError

logger = logging.getLogger(__name__)


class TokenResponse(BaseModel):
    """Discord OAuth2 token exchange payload"""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    token_type: str
    expires_in: int
    refresh_token: str | None = None
    scope: str


class UserProfile(BaseModel):
    """Subset of the /users/@me payload returned to the caller"""

    model_config = ConfigDict(extra="ignore")

    id: str
    username: str
    discriminator: str
    email: str | None = None
    avatar: str | None = None


def response_payload(response: httpx.Response) -> Any:
    """Decode a Discord response body, falling back to raw text"""
    try:
        return response.json()
    except ValueError:
        return response.text


class DiscordAPIClient:
    """Client for the Discord bot message and OAuth2 endpoints"""

    # Discord OAuth scopes
    OAUTH_SCOPES = [
        "identify",
        "email",
        "guilds",
    ]

    DISCORD_API_URL = "https://discord.com/api/v10"
    DISCORD_OAUTH_URL = "https://discord.com/api/oauth2"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri

        # Shared HTTP client, reuses TCP connections across requests
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close the shared HTTP client. Call on app shutdown."""
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Bot messages
    # ------------------------------------------------------------------

    async def send_message(self, channel_id: str, message: str, bot_token: str) -> httpx.Response:
        """Post a message to a channel as the bot. The caller interprets the response."""
        url = f"{self.DISCORD_API_URL}/channels/{quote(channel_id, safe='')}/messages"
        response = await self._http.post(
            url,
            headers={"Authorization": f"Bot {bot_token}"},
            json={"content": message},
        )
        logger.debug(f"Send to channel {channel_id}: {response.status_code}")
        return response

    # ------------------------------------------------------------------
    # OAuth2
    # ------------------------------------------------------------------

    def generate_oauth_url(self, state: str) -> str:
        """Generate Discord OAuth authorization URL"""
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.OAUTH_SCOPES),
            "state": state,
        }
        return f"{self.DISCORD_OAUTH_URL}/authorize?{urlencode(params, quote_via=quote)}"

    async def exchange_code_for_token(self, code: str) -> TokenResponse:
        """
        Exchange OAuth code for access token

        Raises:
            TokenExchangeError: Discord answered with a non-2xx status
        """
        response = await self._http.post(
            f"{self.DISCORD_OAUTH_URL}/token",
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.redirect_uri,
            },
            headers={
                "Content-Type": "application/x-www-form-urlencoded",
            },
        )

        if not response.is_success:
            logger.error(f"Failed to exchange code: {response.status_code}")
            raise TokenExchangeError(
                "Failed to exchange code for token",
                response.status_code,
                details=response_payload(response),
            )

        return TokenResponse.model_validate(response.json())

    async def get_current_user(self, access_token: str) -> UserProfile:
        """Get the profile of the user who owns the access token"""
        response = await self._http.get(
            f"{self.DISCORD_API_URL}/users/@me",
            headers={"Authorization": f"Bearer {access_token}"},
        )

        if not response.is_success:
            logger.error(f"Failed to get user info: {response.status_code}")
            raise ProfileFetchError(
                "Failed to fetch user information",
                response.status_code,
                details=response_payload(response),
            )

        return UserProfile.model_validate(response.json())
