"""The 'system' settings singleton stored in the config table."""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from railcare.models import Config
from railcare.schemas.config import SystemConfig

if TYPE_CHECKING:
    from railcare.core.config import Settings

SYSTEM_CONFIG_KEY = "system"


def default_system_config(settings: "Settings") -> SystemConfig:
    """Defaults used the first time settings are read: SLA hours, SMTP from env, upload limits."""
    return SystemConfig.model_validate(
        {
            "sla_thresholds": {"high": 4, "medium": 24, "low": 72},
            "email_settings": {
                "enabled": True,
                "smtp_host": settings.SMTP_HOST or "",
                "smtp_port": settings.SMTP_PORT,
                "smtp_user": settings.SMTP_USER or "",
                "smtp_from": settings.SMTP_FROM,
            },
            "system_settings": {
                "maintenance_mode": False,
                "max_file_size": 5,
                "allowed_file_types": ["jpg", "jpeg", "png", "gif"],
            },
        }
    )


def get_system_config(db: Session, settings: "Settings") -> SystemConfig:
    """Return the stored settings, creating the row with defaults when missing."""
    row = db.query(Config).filter(Config.key == SYSTEM_CONFIG_KEY).first()
    if row is None:
        config = default_system_config(settings)
        db.add(Config(key=SYSTEM_CONFIG_KEY, value=config.model_dump()))
        db.commit()
        return config
    return SystemConfig.model_validate(row.value)


def save_system_config(db: Session, config: SystemConfig) -> SystemConfig:
    """Replace (or create) the stored settings."""
    row = db.query(Config).filter(Config.key == SYSTEM_CONFIG_KEY).first()
    if row is None:
        db.add(Config(key=SYSTEM_CONFIG_KEY, value=config.model_dump()))
    else:
        row.value = config.model_dump()
    db.commit()
    return config
