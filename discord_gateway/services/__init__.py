"""Services layer - Discord API access and OAuth state binding

Services are initialized with their dependencies and accessed through dependency injection.
"""

from .discord_api import DiscordAPIClient, TokenResponse, UserProfile
from .oauth_state import (
    STATE_COOKIE,
    CookieStateStore,
    MemoryStateStore,
    OAuthStateStore,
)

__all__ = [
    "STATE_COOKIE",
    "CookieStateStore",
    "DiscordAPIClient",
    "MemoryStateStore",
    "OAuthStateStore",
    "TokenResponse",
    "UserProfile",
]
