"""Members service routers package."""

from services.members_service.routers.admin_status import router as status_router
from services.members_service.routers.membership import (
    router as membership_router,
)
from services.members_service.routers.settings import router as settings_router

__all__ = [
    "status_router",
    "settings_router",
    "membership_router",
]
