"""Core app configuration and database."""

from railcare.core.config import get_settings, settings
from railcare.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
