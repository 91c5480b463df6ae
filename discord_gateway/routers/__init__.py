"""API Routers package

Routers are organized by feature domain.
"""

from . import auth_router, info_router, messages_router

__all__ = [
    "auth_router",
    "info_router",
    "messages_router",
]
