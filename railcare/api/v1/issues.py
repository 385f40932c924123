"""Issue reports: station-scoped listing, multipart creation, edits, status changes and assignment."""

import logging
from datetime import UTC, datetime
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session, joinedload

from railcare.api.v1.auth import (
    ensure_station_access,
    get_current_user,
    require_roles,
    scope_query,
)
from railcare.api.v1.media import save_uploaded_photos
from railcare.core.config import settings
from railcare.core.database import get_db
from railcare.models import Issue, StationAmenity, User
from railcare.schemas.auth import CurrentUser
from railcare.schemas.common import (
    MANAGER_ROLES,
    OPEN_ISSUE_STATUSES,
    OPERATOR_ROLES,
    STATION_BOUND_ROLES,
    SUPER_ADMIN,
    IssueStatus,
    Priority,
)
from railcare.schemas.issue import IssueAssign, IssueOut, IssueStatusUpdate, IssueUpdate
from railcare.services.mailer import send_issue_alert

logger = logging.getLogger(__name__)

router = APIRouter()

_ISSUE_LOAD_OPTIONS = (
    joinedload(Issue.station),
    joinedload(Issue.station_amenity).joinedload(StationAmenity.amenity_type),
    joinedload(Issue.reported_by),
    joinedload(Issue.assigned_to),
)


def _load_issue(db: Session, issue_id: int) -> Issue:
    issue = (
        db.query(Issue)
        .options(*_ISSUE_LOAD_OPTIONS)
        .filter(Issue.id == issue_id)
        .first()
    )
    if issue is None:
        raise HTTPException(status_code=404, detail="Issue not found")
    return issue


def _ensure_issue_access(user: CurrentUser, issue: Issue) -> None:
    """Station staff see their station's issues; station-less callers see only their own reports."""
    if user.role == SUPER_ADMIN:
        return
    if user.station_id is None and issue.reported_by_id == user.id:
        return
    ensure_station_access(user, issue.station_id)


@router.get("", response_model=list[IssueOut])
def list_issues(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    station_id: int | None = None,
    status: Annotated[
        IssueStatus | Literal["open"] | None,
        Query(description="An issue status, or 'open' for reported/acknowledged/assigned"),
    ] = None,
    priority: Priority | None = None,
    assigned_to: int | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
) -> list[Issue]:
    """
    List issues, newest first. Non-SuperAdmin callers only ever see their own
    station's issues (or, without a station, the issues they reported), whatever
    station_id they pass.
    """
    query = db.query(Issue).options(*_ISSUE_LOAD_OPTIONS)
    if user.role != SUPER_ADMIN and user.station_id is None:
        query = query.filter(Issue.reported_by_id == user.id)
    else:
        query = scope_query(query, Issue.station_id, user, station_id)

    if status == "open":
        query = query.filter(Issue.status.in_(OPEN_ISSUE_STATUSES))
    elif status:
        query = query.filter(Issue.status == status)
    if priority:
        query = query.filter(Issue.priority == priority)
    if assigned_to is not None:
        query = query.filter(Issue.assigned_to_id == assigned_to)
    if date_from is not None:
        query = query.filter(Issue.reported_at >= date_from)
    if date_to is not None:
        query = query.filter(Issue.reported_at <= date_to)
    return query.order_by(Issue.reported_at.desc(), Issue.id.desc()).all()


@router.post("", response_model=IssueOut, status_code=201)
async def create_issue(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    amenity_id: Annotated[int, Form()],
    priority: Annotated[Priority, Form()],
    description: Annotated[str, Form(min_length=10)],
    photos: Annotated[list[UploadFile] | None, File()] = None,
) -> Issue:
    """
    Report an issue against a station amenity (multipart form: amenity_id,
    priority, description, photos). The station is taken from the amenity.
    High-priority issues trigger an alert e-mail; a failed e-mail is logged only.
    """
    amenity = db.query(StationAmenity).filter(StationAmenity.id == amenity_id).first()
    if amenity is None:
        raise HTTPException(status_code=404, detail="Amenity not found")

    paths = await save_uploaded_photos(photos)
    issue = Issue(
        station_id=amenity.station_id,
        station_amenity_id=amenity.id,
        reported_by_id=user.id,
        priority=priority,
        status="reported",
        description=description.strip(),
        photos=paths,
        reported_at=datetime.now(UTC),
    )
    db.add(issue)
    db.commit()
    issue = _load_issue(db, issue.id)
    logger.info(
        "Issue reported",
        extra={
            "issue_id": issue.id,
            "station_id": issue.station_id,
            "priority": issue.priority,
        },
    )

    if priority == "high":
        result = await send_issue_alert(issue, issue.station, settings)
        if not result.success:
            logger.warning(
                "High priority alert not sent",
                extra={"issue_id": issue.id, "reason": result.error},
            )
    return issue


@router.get("/{issue_id}", response_model=IssueOut)
def get_issue(
    issue_id: int,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> Issue:
    issue = _load_issue(db, issue_id)
    _ensure_issue_access(user, issue)
    return issue


@router.put("/{issue_id}", response_model=IssueOut)
def update_issue(
    issue_id: int,
    body: IssueUpdate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(require_roles(*MANAGER_ROLES))],
) -> Issue:
    """Edit notes and/or description."""
    issue = _load_issue(db, issue_id)
    _ensure_issue_access(user, issue)
    for field, value in body.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(issue, field, value)
    db.commit()
    return _load_issue(db, issue_id)


@router.patch("/{issue_id}/status", response_model=IssueOut)
def update_issue_status(
    issue_id: int,
    body: IssueStatusUpdate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(require_roles(*OPERATOR_ROLES))],
) -> Issue:
    """
    Set any status from any current status. Only 'resolved' stamps resolved_at;
    the other timestamps are left untouched.
    """
    issue = _load_issue(db, issue_id)
    _ensure_issue_access(user, issue)
    previous = issue.status
    issue.status = body.status
    if body.status == "resolved":
        issue.resolved_at = datetime.now(UTC)
    db.commit()
    logger.info(
        "Issue status changed",
        extra={"issue_id": issue_id, "from_status": previous, "to_status": body.status},
    )
    return _load_issue(db, issue_id)


@router.patch("/{issue_id}/assign", response_model=IssueOut)
def assign_issue(
    issue_id: int,
    body: IssueAssign,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(require_roles(*OPERATOR_ROLES))],
) -> Issue:
    """Assign to a StationManager or Staff user and set status 'assigned'."""
    assignee = db.query(User).filter(User.id == body.assigned_to_id).first()
    if assignee is None or assignee.role not in STATION_BOUND_ROLES:
        raise HTTPException(status_code=400, detail="Invalid assigned user")
    issue = _load_issue(db, issue_id)
    _ensure_issue_access(user, issue)
    issue.assigned_to_id = assignee.id
    issue.status = "assigned"
    db.commit()
    logger.info(
        "Issue assigned",
        extra={"issue_id": issue_id, "assigned_to_id": assignee.id},
    )
    return _load_issue(db, issue_id)
