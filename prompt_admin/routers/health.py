from fastapi import APIRouter

from prompt_admin.db import check_database_health
from prompt_admin.core.config import settings
from prompt_admin.schemas import HealthResponse


router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
def health_check():
    db_healthy = check_database_health()
    return HealthResponse(
        status="healthy" if db_healthy else "degraded",
        database="connected" if db_healthy else "disconnected",
        version=settings.app_version
    )
