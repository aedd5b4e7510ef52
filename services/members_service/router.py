"""Members service routers - single import point for the app factory."""

from services.members_service.routers import (
    membership_router,
    settings_router,
    status_router,
)

routers = [status_router, settings_router, membership_router]

__all__ = [
    "routers",
    "status_router",
    "settings_router",
    "membership_router",
]
