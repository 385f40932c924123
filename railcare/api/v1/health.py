"""Health check: database connectivity and whether e-mail and AI are configured."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from railcare.core.config import settings
from railcare.core.database import check_db_connected, get_db
from railcare.schemas.health import HealthResponse
from railcare.services.mailer import is_mail_configured

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    """
    Return service health status and database connectivity.
    No e-mail or AI request is made; those report configured/not_configured only.
    """
    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
        email="configured" if is_mail_configured(settings) else "not_configured",
        ai="configured" if settings.openai_configured else "not_configured",
    )
