"""Schemas for the system settings singleton."""

from pydantic import BaseModel, Field


class SlaThresholds(BaseModel):
    """Target resolution hours per priority."""

    high: float = Field(..., ge=0)
    medium: float = Field(..., ge=0)
    low: float = Field(..., ge=0)


class EmailSettings(BaseModel):
    enabled: bool
    smtp_host: str
    smtp_port: int = Field(..., ge=0, le=65535)
    smtp_user: str
    smtp_from: str


class SystemSettings(BaseModel):
    maintenance_mode: bool
    max_file_size: float = Field(..., gt=0, description="Megabytes")
    allowed_file_types: list[str]


class SystemConfig(BaseModel):
    sla_thresholds: SlaThresholds
    email_settings: EmailSettings
    system_settings: SystemSettings


class ConfigUpdateResponse(BaseModel):
    success: bool = True
    config: SystemConfig
