"""API v1 routes."""

from fastapi import APIRouter

from railcare.api.v1 import (
    ai,
    alerts,
    amenity_types,
    auth,
    config,
    health,
    inspections,
    issues,
    media,
    reports,
    stations,
    users,
)

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(stations.router, prefix="/stations", tags=["stations"])
router.include_router(amenity_types.router, prefix="/amenity-types", tags=["amenity-types"])
router.include_router(issues.router, prefix="/issues", tags=["issues"])
router.include_router(inspections.router, prefix="/inspections", tags=["inspections"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(config.router, prefix="/config", tags=["config"])
router.include_router(reports.router, prefix="/reports", tags=["reports"])
router.include_router(media.router, prefix="/media", tags=["media"])
router.include_router(ai.router, prefix="/ai", tags=["ai"])
router.include_router(alerts.router, prefix="/alerts", tags=["alerts"])
