"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for the health check endpoint."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    environment: str = Field(description="Current app environment (e.g. dev, prod)")
    database: Literal["connected", "disconnected"] | None = Field(
        default=None,
        description="Database connectivity status when check is performed",
    )
    email: Literal["configured", "not_configured"] = Field(
        default="not_configured",
        description="Whether SMTP settings are present (no mail is sent)",
    )
    ai: Literal["configured", "not_configured"] = Field(
        default="not_configured",
        description="Whether the photo analysis API key is present",
    )
