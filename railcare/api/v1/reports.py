"""MIS reports, issue analytics and persisted report snapshots."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from railcare.api.v1.auth import (
    get_current_user,
    require_roles,
    require_station,
)
from railcare.core.database import get_db
from railcare.models import Report
from railcare.schemas.auth import CurrentUser
from railcare.schemas.common import MANAGER_ROLES, AnalyticsPeriod, ReportPeriod
from railcare.schemas.report import (
    IssueAnalyticsResponse,
    MISReportResponse,
    ReportSnapshotCreate,
    ReportSnapshotOut,
)
from railcare.services.analytics import build_issue_analytics, build_mis_overview
from railcare.services.metrics import calculate_mis_metrics

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/mis", response_model=MISReportResponse)
def get_mis_report(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    station_id: int | None = None,
    period: ReportPeriod = "daily",
) -> MISReportResponse:
    """
    MIS metrics for the period plus all-time overview figures. SuperAdmin may
    pick a station (or none for all); everyone else gets their own station.
    """
    station_id = require_station(user, station_id)
    metrics = calculate_mis_metrics(db, station_id=station_id, period=period)
    overview = build_mis_overview(db, station_id=station_id)
    return MISReportResponse(
        **overview.model_dump(),
        period=period,
        station_id=station_id,
        metrics=metrics,
        generated_at=datetime.now(UTC),
        avg_resolution_time=metrics.avg_resolution_time,
    )


@router.get("/issues", response_model=IssueAnalyticsResponse)
def get_issue_analytics(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    station_id: int | None = None,
    period: AnalyticsPeriod = "7d",
) -> IssueAnalyticsResponse:
    """Issue analytics for one station; SuperAdmin must pass station_id."""
    station_id = require_station(user, station_id)
    if station_id is None:
        raise HTTPException(status_code=400, detail="station_id is required")
    return build_issue_analytics(db, station_id=station_id, period=period)


@router.get("/snapshots", response_model=list[ReportSnapshotOut])
def list_snapshots(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    station_id: int | None = None,
    period: ReportPeriod | None = None,
) -> list[Report]:
    """
    Stored snapshots, newest first. Non-SuperAdmin callers get their station's
    snapshots only; system-wide ones (no station) are SuperAdmin-only.
    """
    station_id = require_station(user, station_id)
    query = db.query(Report)
    if station_id is not None:
        query = query.filter(Report.station_id == station_id)
    if period:
        query = query.filter(Report.period == period)
    return query.order_by(Report.date.desc(), Report.id.desc()).all()


@router.post("/snapshots", response_model=ReportSnapshotOut, status_code=201)
def create_snapshot(
    body: ReportSnapshotCreate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(require_roles(*MANAGER_ROLES))],
) -> Report:
    """Compute MIS metrics now and store them as a report snapshot."""
    station_id = require_station(user, body.station_id)
    now = datetime.now(UTC)
    metrics = calculate_mis_metrics(db, station_id=station_id, period=body.period, now=now)
    report = Report(
        station_id=station_id,
        date=now,
        period=body.period,
        generated_by_id=user.id,
        summary_json=metrics.model_dump(),
        created_at=now,
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    logger.info(
        "Report snapshot stored",
        extra={"report_id": report.id, "station_id": station_id, "period": body.period},
    )
    return report
