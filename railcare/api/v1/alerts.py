"""Manual triggers for overdue alerts and the SMTP test e-mail (SuperAdmin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from railcare.api.v1.auth import require_roles
from railcare.core.config import settings
from railcare.core.database import get_db
from railcare.schemas.alerts import EmailCheckResponse, RunAlertsResponse
from railcare.schemas.auth import CurrentUser
from railcare.schemas.common import SUPER_ADMIN
from railcare.services.alerts import run_overdue_alerts
from railcare.services.mailer import send_test_email

router = APIRouter()

SuperAdmin = Annotated[CurrentUser, Depends(require_roles(SUPER_ADMIN))]


@router.post("/run-now", response_model=RunAlertsResponse)
async def run_alerts_now(
    db: Annotated[Session, Depends(get_db)],
    _admin: SuperAdmin,
) -> RunAlertsResponse:
    """Send overdue alerts immediately (same job as `python -m railcare.alerts`)."""
    results = await run_overdue_alerts(db, settings)
    return RunAlertsResponse(
        message=f"Processed {len(results)} overdue issues",
        results=results,
    )


@router.post("/test-email", response_model=EmailCheckResponse)
async def test_email(_admin: SuperAdmin) -> EmailCheckResponse:
    """Send a test e-mail to ALERT_EMAIL_TO; failures are reported in the body."""
    result = await send_test_email(settings)
    if result.success:
        return EmailCheckResponse(
            success=True,
            message="Test email sent successfully",
            message_id=result.message_id,
        )
    return EmailCheckResponse(
        success=False,
        message=f"Failed to send test email: {result.error}",
    )
