"""Overdue issue alerts: find issues left open past the threshold and e-mail each one."""

import logging
import math
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from railcare.models import Issue
from railcare.schemas.alerts import OverdueAlertResult
from railcare.schemas.common import CLOSED_ISSUE_STATUSES
from railcare.services.mailer import send_overdue_issue_alert
from railcare.services.metrics import ensure_utc

if TYPE_CHECKING:
    from railcare.core.config import Settings

logger = logging.getLogger(__name__)


def find_overdue_issues(
    db: Session, settings: "Settings", now: datetime | None = None
) -> list[Issue]:
    """Issues reported more than ALERT_OVERDUE_HOURS ago that are not resolved or closed."""
    now = now or datetime.now(UTC)
    cutoff = now - timedelta(hours=settings.ALERT_OVERDUE_HOURS)
    return (
        db.query(Issue)
        .filter(
            Issue.reported_at < cutoff,
            Issue.status.notin_(sorted(CLOSED_ISSUE_STATUSES)),
        )
        .order_by(Issue.reported_at)
        .all()
    )


def hours_since(reported_at: datetime, now: datetime) -> int:
    return math.floor((now - ensure_utc(reported_at)).total_seconds() / 3600)


async def run_overdue_alerts(
    db: Session, settings: "Settings", now: datetime | None = None
) -> list[OverdueAlertResult]:
    """
    Send one overdue alert per open issue past the threshold. Nothing is recorded
    about sent alerts, so re-running sends them again.
    """
    now = now or datetime.now(UTC)
    results: list[OverdueAlertResult] = []
    for issue in find_overdue_issues(db, settings, now):
        hours_overdue = hours_since(issue.reported_at, now)
        result = await send_overdue_issue_alert(issue, issue.station, hours_overdue, settings)
        results.append(
            OverdueAlertResult(
                issue_id=issue.id,
                station_name=issue.station.name if issue.station else None,
                hours_overdue=hours_overdue,
                email_sent=result.success,
                error=result.error,
            )
        )

    sent = sum(1 for r in results if r.email_sent)
    logger.info(
        "Overdue alert run: issues=%s, emails_sent=%s",
        len(results),
        sent,
    )
    return results
