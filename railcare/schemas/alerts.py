"""Schemas for alert runs and test e-mails."""

from pydantic import BaseModel


class OverdueAlertResult(BaseModel):
    issue_id: int
    station_name: str | None = None
    hours_overdue: int
    email_sent: bool
    error: str | None = None


class RunAlertsResponse(BaseModel):
    message: str
    results: list[OverdueAlertResult]


class EmailCheckResponse(BaseModel):
    success: bool
    message: str
    message_id: str | None = None
