"""Dashboard analytics: MIS overview figures and per-station issue analytics."""

from collections import Counter
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from railcare.models import Issue, Station, StationAmenity, User
from railcare.schemas.common import (
    ISSUE_STATUSES,
    OPEN_ISSUE_STATUSES,
    PRIORITIES,
    AnalyticsPeriod,
)
from railcare.schemas.report import (
    AmenityTypeCount,
    IssueAnalyticsResponse,
    MISOverview,
    RecentIssue,
    ResolutionTrendPoint,
    StationUptime,
)
from railcare.services.metrics import ensure_utc, uptime_percentage

ANALYTICS_PERIOD_DAYS: dict[str, int] = {"7d": 7, "30d": 30, "90d": 90}
MIS_RECENT_ISSUES = 10
ANALYTICS_RECENT_ISSUES = 5
TOP_AMENITY_TYPES = 5


def count_by(issues: Sequence[Issue], attr: str, keys: Sequence[str]) -> dict[str, int]:
    """Count issues per value of attr; every key in keys is present."""
    counts = Counter(getattr(i, attr) for i in issues)
    return {k: counts.get(k, 0) for k in keys}


def recent_issues(
    issues: Sequence[Issue],
    limit: int,
    station_names: dict[int, str] | None = None,
) -> list[RecentIssue]:
    """Most recently reported issues first."""
    ordered = sorted(issues, key=lambda i: ensure_utc(i.reported_at), reverse=True)
    return [
        RecentIssue(
            id=i.id,
            description=i.description,
            priority=i.priority,
            status=i.status,
            station_name=(station_names or {}).get(i.station_id),
            reported_at=i.reported_at,
        )
        for i in ordered[:limit]
    ]


def build_mis_overview(db: Session, station_id: int | None = None) -> MISOverview:
    """
    All-time totals shown alongside MIS metrics: counts, breakdowns by priority and
    status, per-station uptime and the latest issues. Scoped to one station when
    station_id is given.
    """
    station_query = db.query(Station)
    user_query = db.query(User)
    issue_query = db.query(Issue)
    amenity_query = db.query(StationAmenity)
    if station_id is not None:
        station_query = station_query.filter(Station.id == station_id)
        user_query = user_query.filter(User.station_id == station_id)
        issue_query = issue_query.filter(Issue.station_id == station_id)
        amenity_query = amenity_query.filter(StationAmenity.station_id == station_id)

    stations = station_query.order_by(Station.name).all()
    issues = issue_query.all()
    amenities = amenity_query.all()

    issues_per_station = Counter(i.station_id for i in issues)
    statuses_per_station: dict[int, list[str]] = {}
    for amenity in amenities:
        statuses_per_station.setdefault(amenity.station_id, []).append(amenity.status)

    stations_data = []
    for station in stations:
        statuses = statuses_per_station.get(station.id, [])
        stations_data.append(
            StationUptime(
                id=station.id,
                name=station.name,
                code=station.code,
                region=station.region,
                total_amenities=len(statuses),
                working_amenities=sum(1 for s in statuses if s == "ok"),
                issues_count=issues_per_station.get(station.id, 0),
                uptime_percentage=uptime_percentage(statuses),
            )
        )

    station_names = {s.id: s.name for s in stations}
    return MISOverview(
        total_stations=len(stations),
        total_users=user_query.count(),
        total_issues=len(issues),
        total_amenities=len(amenities),
        issues_by_priority=count_by(issues, "priority", PRIORITIES),
        issues_by_status=count_by(issues, "status", ISSUE_STATUSES),
        stations_data=stations_data,
        recent_issues=recent_issues(issues, MIS_RECENT_ISSUES, station_names),
        system_uptime=uptime_percentage([a.status for a in amenities]),
    )


def resolution_trends(
    issues: Sequence[Issue], days: int, now: datetime
) -> list[ResolutionTrendPoint]:
    """Per-day reported and resolved counts for the last `days` days, oldest first."""
    reported = Counter(ensure_utc(i.reported_at).date() for i in issues)
    resolved = Counter(
        ensure_utc(i.resolved_at).date() for i in issues if i.resolved_at is not None
    )
    points = []
    for offset in range(days - 1, -1, -1):
        day = (now - timedelta(days=offset)).date()
        points.append(
            ResolutionTrendPoint(
                date=day.isoformat(),
                reported=reported.get(day, 0),
                resolved=resolved.get(day, 0),
            )
        )
    return points


def top_amenity_types(
    issues: Sequence[Issue], amenities: Sequence[StationAmenity], limit: int
) -> list[AmenityTypeCount]:
    """Amenity type labels ranked by number of issues raised against them."""
    label_by_amenity = {
        a.id: (a.amenity_type.label if a.amenity_type is not None else "Unknown")
        for a in amenities
    }
    counts = Counter(
        label_by_amenity[i.station_amenity_id]
        for i in issues
        if i.station_amenity_id in label_by_amenity
    )
    return [
        AmenityTypeCount(amenity_type=label, count=count)
        for label, count in counts.most_common(limit)
    ]


def build_issue_analytics(
    db: Session,
    station_id: int,
    period: AnalyticsPeriod = "7d",
    now: datetime | None = None,
) -> IssueAnalyticsResponse:
    """
    Issue analytics for one station. Totals and breakdowns cover all of the
    station's issues; the trend covers the last 7, 30 or 90 days.
    """
    now = ensure_utc(now or datetime.now(UTC))
    days = ANALYTICS_PERIOD_DAYS[period]

    issues = db.query(Issue).filter(Issue.station_id == station_id).all()
    amenities = (
        db.query(StationAmenity).filter(StationAmenity.station_id == station_id).all()
    )

    resolved_with_time = [
        i for i in issues if i.status == "resolved" and i.resolved_at is not None
    ]
    avg_resolution = 0.0
    if resolved_with_time:
        total_hours = sum(
            (ensure_utc(i.resolved_at) - ensure_utc(i.reported_at)).total_seconds() / 3600
            for i in resolved_with_time
        )
        avg_resolution = round(total_hours / len(resolved_with_time), 1)

    by_status = count_by(issues, "status", ISSUE_STATUSES)
    return IssueAnalyticsResponse(
        station_id=station_id,
        period=period,
        total_issues=len(issues),
        open_issues=sum(by_status[s] for s in OPEN_ISSUE_STATUSES),
        resolved_issues=by_status["resolved"],
        closed_issues=by_status["closed"],
        issues_by_priority=count_by(issues, "priority", PRIORITIES),
        issues_by_status=by_status,
        avg_resolution_time=avg_resolution,
        recent_issues=recent_issues(issues, ANALYTICS_RECENT_ISSUES),
        top_amenity_types=top_amenity_types(issues, amenities, TOP_AMENITY_TYPES),
        resolution_trends=resolution_trends(issues, days, now),
        generated_at=now,
    )
