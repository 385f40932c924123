"""Schemas for MIS metrics, analytics and persisted report snapshots."""

from datetime import datetime

from pydantic import BaseModel, Field

from railcare.schemas.common import AnalyticsPeriod, IssueStatus, Priority, ReportPeriod


class MISMetrics(BaseModel):
    """Issue and uptime figures for one station (or all) over one period."""

    uptime_by_amenity_type: dict[str, float] = Field(default_factory=dict)
    avg_resolution_time: float = Field(default=0.0, description="Hours")
    open_issues_count: int = 0
    total_issues_count: int = 0
    resolved_issues_count: int = 0
    high_priority_issues_count: int = 0
    inspections_count: int = 0


class StationUptime(BaseModel):
    id: int
    name: str
    code: str
    region: str
    total_amenities: int
    working_amenities: int
    issues_count: int
    uptime_percentage: float


class RecentIssue(BaseModel):
    id: int
    description: str
    priority: Priority
    status: IssueStatus
    station_name: str | None = None
    reported_at: datetime


class MISOverview(BaseModel):
    total_stations: int
    total_users: int
    total_issues: int
    total_amenities: int
    issues_by_priority: dict[str, int]
    issues_by_status: dict[str, int]
    stations_data: list[StationUptime]
    recent_issues: list[RecentIssue]
    system_uptime: float


class MISReportResponse(MISOverview):
    period: ReportPeriod
    station_id: int | None = None
    metrics: MISMetrics
    generated_at: datetime
    avg_resolution_time: float


class AmenityTypeCount(BaseModel):
    amenity_type: str
    count: int


class ResolutionTrendPoint(BaseModel):
    date: str
    reported: int
    resolved: int


class IssueAnalyticsResponse(BaseModel):
    station_id: int
    period: AnalyticsPeriod
    total_issues: int
    open_issues: int
    resolved_issues: int
    closed_issues: int
    issues_by_priority: dict[str, int]
    issues_by_status: dict[str, int]
    avg_resolution_time: float
    recent_issues: list[RecentIssue]
    top_amenity_types: list[AmenityTypeCount]
    resolution_trends: list[ResolutionTrendPoint]
    generated_at: datetime


class ReportSnapshotCreate(BaseModel):
    station_id: int | None = None
    period: ReportPeriod = "daily"


class ReportSnapshotOut(BaseModel):
    id: int
    station_id: int | None = None
    date: datetime
    period: ReportPeriod
    generated_by_id: int
    summary_json: MISMetrics
    created_at: datetime | None = None

    class Config:
        from_attributes = True
