"""Health check endpoints."""

from fastapi import APIRouter, Request, status
from pydantic import BaseModel

from app.config import settings
from app.database import check_database_connection

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    environment: str


class DetailedHealthResponse(HealthResponse):
    """Health of the database and the background pieces of the service."""

    database: str
    reminders: str
    email: str


def _reminder_state(request: Request) -> str:
    reminders = getattr(request.app.state, "reminders", None)
    if reminders is None or not reminders.enabled:
        return "disabled"
    return "running" if reminders.is_running else "stopped"


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Basic health check",
)
async def health_check() -> HealthResponse:
    """Liveness check; does not touch the database."""
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        environment=settings.environment,
    )


@router.get(
    "/health/detailed",
    response_model=DetailedHealthResponse,
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Detailed health check",
)
async def detailed_health_check(request: Request) -> DetailedHealthResponse:
    """
    Readiness check.

    Only the database decides between healthy and degraded. A stopped
    reminder job or missing email configuration is reported but does not
    affect booking.
    """
    db_healthy = await check_database_connection()
    notifier = getattr(request.app.state, "notifier", None)

    return DetailedHealthResponse(
        status="healthy" if db_healthy else "degraded",
        version=settings.app_version,
        environment=settings.environment,
        database="healthy" if db_healthy else "unhealthy",
        reminders=_reminder_state(request),
        email="configured" if notifier is not None and notifier.enabled else "disabled",
    )


@router.get(
    "/ping",
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Simple ping",
)
async def ping() -> dict[str, str]:
    return {"message": "pong"}
