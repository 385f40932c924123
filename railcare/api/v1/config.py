"""System settings singleton: SLA thresholds, e-mail and upload settings."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from railcare.api.v1.auth import get_current_user, require_roles
from railcare.core.config import settings
from railcare.core.database import get_db
from railcare.schemas.auth import CurrentUser
from railcare.schemas.common import SUPER_ADMIN
from railcare.schemas.config import ConfigUpdateResponse, SystemConfig
from railcare.services.system_config import get_system_config, save_system_config

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=SystemConfig)
def read_config(
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> SystemConfig:
    """Current settings; defaults are stored on first read."""
    return get_system_config(db, settings)


@router.put("", response_model=ConfigUpdateResponse)
@router.post("", response_model=ConfigUpdateResponse, include_in_schema=False)
def update_config(
    body: SystemConfig,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(require_roles(SUPER_ADMIN))],
) -> ConfigUpdateResponse:
    """Replace the whole settings document. POST is accepted as an alias of PUT."""
    config = save_system_config(db, body)
    logger.info("System config updated", extra={"user_id": user.id})
    return ConfigUpdateResponse(success=True, config=config)
