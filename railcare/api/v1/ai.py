"""Model-assisted photo analysis for issue reporting."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from railcare.api.v1.auth import get_current_user
from railcare.api.v1.media import read_upload
from railcare.core.config import settings
from railcare.schemas.ai import PhotoAnalysisResponse
from railcare.schemas.auth import CurrentUser
from railcare.services.photo_analysis import (
    PhotoAnalysisError,
    analyze_photo,
    generate_issue_report,
)

router = APIRouter()


@router.post("/analyze-photo", response_model=PhotoAnalysisResponse)
async def analyze_amenity_photo(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    image: Annotated[UploadFile, File()],
    amenity_type: Annotated[str, Form(min_length=1)],
) -> PhotoAnalysisResponse:
    """
    Analyze an amenity photo and draft an issue report from it.

    Returns 503 when the AI service is not configured, unreachable or times out,
    and 502 when it answers with an error or unusable output.
    """
    if not settings.openai_configured:
        raise HTTPException(
            status_code=503,
            detail="AI service not configured. Please add OPENAI_API_KEY to environment variables.",
        )
    data = await read_upload(image)
    try:
        analysis = await analyze_photo(data, amenity_type, settings)
        report = await generate_issue_report(analysis, amenity_type, settings)
    except PhotoAnalysisError as e:
        raise HTTPException(status_code=502 if e.upstream else 503, detail=e.message) from e
    return PhotoAnalysisResponse(success=True, analysis=analysis, description=report)
