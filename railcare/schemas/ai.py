"""Schemas for model-assisted photo analysis."""

from pydantic import BaseModel, Field

from railcare.schemas.common import Priority


class PhotoAnalysisResult(BaseModel):
    """Structured reading of one amenity photo, as returned by the model."""

    issue_type: str = "Unknown"
    severity: Priority = "low"
    description: str = "No description available"
    confidence: float = Field(default=0, ge=0, le=100)
    suggestions: list[str] = Field(default_factory=list)


class IssueReportSuggestion(BaseModel):
    """Draft issue report generated from an analysis."""

    title: str = "Issue Report"
    description: str
    priority: Priority
    category: str = "General"


class PhotoAnalysisResponse(BaseModel):
    success: bool = True
    analysis: PhotoAnalysisResult
    description: IssueReportSuggestion
