"""
Shared pytest fixtures.

Discord is never contacted: every outbound request is answered by a
``FakeDiscord`` handler mounted on ``httpx.MockTransport``.
"""

import json
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from discord_gateway.app import create_app
from discord_gateway.core.config import Settings, get_settings
from discord_gateway.core.dependencies import get_discord_api, get_state_store
from discord_gateway.services import CookieStateStore, DiscordAPIClient

BOT_TOKEN = "test-bot-token-0123456789"
CLIENT_ID = "client-123"
CLIENT_SECRET = "client-secret-xyz"
REDIRECT = "http://testserver/discord/redirect"


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "discord_bot_token": BOT_TOKEN,
        "client_id": CLIENT_ID,
        "client_secret": CLIENT_SECRET,
        "redirect": REDIRECT,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)  # type: ignore[call-arg]


class FakeDiscord:
    """Canned Discord responses keyed by (method, path); records every request."""

    def __init__(self):
        self.routes: dict[tuple[str, str], tuple[int, dict[str, Any]]] = {}
        self.requests: list[httpx.Request] = []
        self.error: Exception | None = None

    def respond(self, method: str, path: str, status_code: int = 200, **kwargs: Any) -> None:
        self.routes[(method, path)] = (status_code, kwargs)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(599, json={"message": "unexpected request"})
        status_code, kwargs = route
        return httpx.Response(status_code, **kwargs)

    def json_body(self, index: int = 0) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def discord() -> FakeDiscord:
    return FakeDiscord()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def app(settings, discord):
    app = create_app()
    api = DiscordAPIClient(
        client_id=settings.client_id,
        client_secret=settings.client_secret,
        redirect_uri=settings.redirect,
        transport=httpx.MockTransport(discord),
    )
    state_store = CookieStateStore()

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_discord_api] = lambda: api
    app.dependency_overrides[get_state_store] = lambda: state_store
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def use_settings(app):
    """Swap the settings seen by route handlers for one test"""

    def _use(**overrides: Any) -> Settings:
        new_settings = make_settings(**overrides)
        app.dependency_overrides[get_settings] = lambda: new_settings
        return new_settings

    return _use
