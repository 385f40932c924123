"""Shared enumerations for roles, statuses and report periods."""

from typing import Literal, get_args

Role = Literal["SuperAdmin", "StationManager", "Staff", "Public"]
AmenityStatus = Literal["ok", "needs_maintenance", "out_of_service"]
IssueStatus = Literal["reported", "acknowledged", "assigned", "resolved", "closed"]
Priority = Literal["low", "medium", "high"]
ReportPeriod = Literal["daily", "weekly", "monthly"]
AnalyticsPeriod = Literal["7d", "30d", "90d"]

SUPER_ADMIN: Role = "SuperAdmin"
STATION_MANAGER: Role = "StationManager"
STAFF: Role = "Staff"
PUBLIC: Role = "Public"

ROLES: tuple[str, ...] = get_args(Role)
ISSUE_STATUSES: tuple[str, ...] = get_args(IssueStatus)
PRIORITIES: tuple[str, ...] = get_args(Priority)

# Roles that must be attached to a station.
STATION_BOUND_ROLES = frozenset({STATION_MANAGER, STAFF})
# Roles that can work on issues and inspections.
OPERATOR_ROLES = (SUPER_ADMIN, STATION_MANAGER, STAFF)
MANAGER_ROLES = (SUPER_ADMIN, STATION_MANAGER)

CLOSED_ISSUE_STATUSES = frozenset({"resolved", "closed"})
OPEN_ISSUE_STATUSES = ("reported", "acknowledged", "assigned")
