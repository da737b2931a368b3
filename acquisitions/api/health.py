"""Health check endpoint with database connectivity check."""

from datetime import UTC, datetime

from fastapi import APIRouter

from acquisitions.api.deps import DbDep, SettingsDep
from acquisitions.core.database import check_db_connected
from acquisitions.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: DbDep, settings: SettingsDep) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Used by the container health check and load balancers.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database=db_status,
        timestamp=datetime.now(UTC),
    )
