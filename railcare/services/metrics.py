"""MIS metrics: amenity uptime per type plus issue and inspection counts for a period."""

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from railcare.models import AmenityType, Inspection, Issue, StationAmenity
from railcare.schemas.common import CLOSED_ISSUE_STATUSES, ReportPeriod
from railcare.schemas.report import MISMetrics

logger = logging.getLogger(__name__)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC (some backends drop the offset on read)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def period_start(period: ReportPeriod, now: datetime | None = None) -> datetime:
    """
    Start of the reporting window: UTC midnight today (daily), now minus seven
    days (weekly), or the first of the current month at UTC midnight (monthly).
    """
    now = ensure_utc(now or datetime.now(UTC))
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "daily":
        return midnight
    if period == "weekly":
        return now - timedelta(days=7)
    if period == "monthly":
        return midnight.replace(day=1)
    raise ValueError(f"Unknown report period: {period!r}")


def uptime_percentage(statuses: Sequence[str]) -> float:
    """Share of amenities with status 'ok', as a percentage; 0 when there are none."""
    if not statuses:
        return 0.0
    working = sum(1 for s in statuses if s == "ok")
    return working / len(statuses) * 100


def average_resolution_hours(issues: Iterable[Issue]) -> float:
    """
    Mean hours from reported_at to resolved_at over resolved/closed issues.

    Issues without resolved_at are left out of both the sum and the count.
    """
    durations = [
        (ensure_utc(i.resolved_at) - ensure_utc(i.reported_at)).total_seconds() / 3600
        for i in issues
        if i.status in CLOSED_ISSUE_STATUSES and i.resolved_at is not None
    ]
    if not durations:
        return 0.0
    return sum(durations) / len(durations)


def summarize_metrics(
    amenity_types: Sequence[AmenityType],
    amenities: Sequence[StationAmenity],
    issues: Sequence[Issue],
    inspections_count: int,
) -> MISMetrics:
    """Build MISMetrics from already-filtered rows. Every amenity type key is present."""
    statuses_by_type: dict[int, list[str]] = defaultdict(list)
    for amenity in amenities:
        statuses_by_type[amenity.amenity_type_id].append(amenity.status)

    uptime_by_amenity_type = {
        (t.key or "unknown"): uptime_percentage(statuses_by_type.get(t.id, []))
        for t in amenity_types
    }

    resolved = [i for i in issues if i.status in CLOSED_ISSUE_STATUSES]
    high_priority = [i for i in issues if i.priority == "high"]

    return MISMetrics(
        uptime_by_amenity_type=uptime_by_amenity_type,
        avg_resolution_time=round(average_resolution_hours(resolved), 2),
        open_issues_count=len(issues) - len(resolved),
        total_issues_count=len(issues),
        resolved_issues_count=len(resolved),
        high_priority_issues_count=len(high_priority),
        inspections_count=inspections_count,
    )


def calculate_mis_metrics(
    db: Session,
    station_id: int | None = None,
    period: ReportPeriod = "daily",
    now: datetime | None = None,
) -> MISMetrics:
    """
    Compute MIS metrics for one station (or all stations when station_id is None).

    Issues are counted by reported_at and inspections by created_at within the
    period. Amenity uptime is the current status snapshot, not period-bound.
    On any error the failure is logged and an all-zero result is returned.
    """
    try:
        start = period_start(period, now)

        amenity_types = db.query(AmenityType).order_by(AmenityType.key).all()

        amenity_query = db.query(StationAmenity)
        issue_query = db.query(Issue).filter(Issue.reported_at >= start)
        inspection_query = db.query(Inspection).filter(Inspection.created_at >= start)
        if station_id is not None:
            amenity_query = amenity_query.filter(StationAmenity.station_id == station_id)
            issue_query = issue_query.filter(Issue.station_id == station_id)
            inspection_query = inspection_query.filter(Inspection.station_id == station_id)

        return summarize_metrics(
            amenity_types,
            amenity_query.all(),
            issue_query.all(),
            inspection_query.count(),
        )
    except Exception:
        logger.exception(
            "MIS metrics calculation failed",
            extra={"station_id": station_id, "period": period},
        )
        return MISMetrics()
