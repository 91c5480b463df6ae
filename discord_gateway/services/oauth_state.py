"""OAuth state stores binding an authorization request to the browser that completes it.

Both stores put the raw state in the ``oauth_state`` cookie. The memory store
also remembers every state it issued, so a state is accepted at most once and
only within its TTL.
"""

import asyncio
import hmac
import logging
import time
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable

from cachetools import TTLCache  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

STATE_COOKIE = "oauth_state"


def states_match(state: str | None, cookie_state: str | None) -> bool:
    """Constant-time equality of the query state and the cookie state"""
    if not state or not cookie_state:
        return False
    return hmac.compare_digest(state.encode(), cookie_state.encode())


class OAuthStateStore(ABC):
    """Issues and verifies OAuth2 CSRF state tokens"""

    @abstractmethod
    async def issue(self) -> str: ...

    @abstractmethod
    async def verify(self, state: str | None, cookie_state: str | None) -> bool: ...


class CookieStateStore(OAuthStateStore):
    """Stateless store: the cookie alone carries the issued state"""

    async def issue(self) -> str:
        return str(uuid.uuid4())

    async def verify(self, state: str | None, cookie_state: str | None) -> bool:
        return states_match(state, cookie_state)


class MemoryStateStore(OAuthStateStore):
    """Process-local store of issued states with expiry and one-time use"""

    def __init__(
        self,
        ttl: float = 600.0,
        maxsize: int = 10_000,
        timer: Callable[[], float] = time.monotonic,
    ):
        # Bounded: once maxsize states are pending, issuing a new one evicts the
        # least recently used, so a flood of /auth/discord hits can push out
        # legitimate pending logins. Size via OAUTH_STATE_MAX_PENDING.
        self._issued: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl, timer=timer)
        self._lock = asyncio.Lock()

    async def issue(self) -> str:
        state = str(uuid.uuid4())
        async with self._lock:
            self._issued[state] = True
        return state

    async def verify(self, state: str | None, cookie_state: str | None) -> bool:
        if not states_match(state, cookie_state):
            return False
        async with self._lock:
            if self._issued.pop(state, None) is None:
                logger.warning("OAuth state unknown, expired or already used")
                return False
        return True

    @property
    def size(self) -> int:
        return len(self._issued)
