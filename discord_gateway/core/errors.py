"""Gateway error taxonomy and its JSON rendering"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


def upstream_status(status_code: int) -> int:
    """Map a non-2xx Discord status to the status we answer with.

    Client and server errors pass through verbatim; anything else
    (informational, redirects) becomes 502 Bad Gateway.
    """
    if 400 <= status_code <= 599:
        return status_code
    return 502


class GatewayError(Exception):
    """Base class for every failure rendered as a JSON error body"""

    status_code: int = 500

    def __init__(
        self,
        error: str,
        *,
        details: Any = None,
        status_code: int | None = None,
        troubleshooting: list[str] | None = None,
        extra: dict[str, Any] | None = None,
    ):
        super().__init__(error)
        self.error = error
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        self.troubleshooting = troubleshooting
        self.extra = extra or {}

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        body.update(self.extra)
        if self.troubleshooting is not None:
            body["troubleshooting"] = self.troubleshooting
        return body


class ConfigError(GatewayError):
    """Required configuration is missing"""

    status_code = 500


class ValidationError(GatewayError):
    """Request fields are missing or invalid"""

    status_code = 400


class AuthProviderError(GatewayError):
    """Discord answered the authorization request with an error"""

    status_code = 400


class AuthError(GatewayError):
    """OAuth state did not match the one bound to this browser"""

    status_code = 400


class UpstreamError(GatewayError):
    """Discord returned a non-2xx response; its status is propagated"""

    def __init__(self, error: str, upstream_status_code: int, **kwargs: Any):
        self.upstream_status_code = upstream_status_code
        super().__init__(error, status_code=upstream_status(upstream_status_code), **kwargs)


class TokenExchangeError(UpstreamError):
    pass


class ProfileFetchError(UpstreamError):
    pass


class SendFailure(UpstreamError):
    """Discord rejected a channel message"""

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body["statusCode"] = self.upstream_status_code
        return body


class InternalError(GatewayError):
    """Unexpected exception caught at a route boundary"""

    status_code = 500


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
