"""FastAPI application for the Members Service."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from libs.common.logging import configure_logging, get_logger

from services.members_service.router import routers
from services.members_service.services.status_resolver import PeriodIntegrityError

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """Create and configure the Members Service FastAPI app."""
    configure_logging()

    app = FastAPI(
        title="Members Service",
        version="0.1.0",
        description="Membership status, renewal and fee administration.",
    )

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "members"}

    @app.exception_handler(PeriodIntegrityError)
    async def period_integrity_handler(request: Request, exc: PeriodIntegrityError):
        logger.warning("Period integrity fault on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc)},
        )

    for router in routers:
        app.include_router(router)

    return app


app = create_app()
