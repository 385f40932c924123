"""Image uploads: resized copies with thumbnails, plus the photo-saving helper used by issue and inspection forms."""

from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from railcare.api.v1.auth import get_current_user
from railcare.core.config import settings
from railcare.schemas.auth import CurrentUser
from railcare.schemas.media import MediaUploadResponse
from railcare.services.media import MediaError, save_photo, store_image

router = APIRouter()


async def read_upload(file: UploadFile) -> bytes:
    """Read one upload, enforcing UPLOAD_ALLOWED_TYPES and UPLOAD_MAX_SIZE (400 otherwise)."""
    if file.content_type not in settings.upload_allowed_types:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type for {file.filename or 'upload'}. "
            f"Allowed: {', '.join(settings.upload_allowed_types)}",
        )
    data = await file.read()
    if len(data) > settings.UPLOAD_MAX_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"File {file.filename or 'upload'} exceeds the maximum size of "
            f"{settings.UPLOAD_MAX_SIZE // (1024 * 1024)} MB",
        )
    return data


async def save_uploaded_photos(files: list[UploadFile] | None) -> list[str]:
    """Validate and store photos as-is; returns their paths relative to UPLOAD_DIR."""
    paths: list[str] = []
    for file in files or []:
        if not file.filename:
            continue
        data = await read_upload(file)
        paths.append(save_photo(data, file.filename, Path(settings.UPLOAD_DIR)))
    return paths


@router.post("/upload", response_model=MediaUploadResponse, status_code=201)
async def upload_media(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    files: Annotated[list[UploadFile], File()],
) -> MediaUploadResponse:
    """
    Upload one or more images as multipart field `files`.

    Each image is re-encoded as JPEG fitted inside 1920x1080 and gets a
    200x200 thumbnail. Returns the public URLs of both.
    """
    if not files:
        raise HTTPException(status_code=400, detail="No files uploaded")
    urls: list[str] = []
    thumbnails: list[str] = []
    for file in files:
        data = await read_upload(file)
        try:
            url, thumb = store_image(data, Path(settings.UPLOAD_DIR))
        except MediaError as e:
            raise HTTPException(status_code=400, detail=e.message) from e
        urls.append(url)
        thumbnails.append(thumb)
    return MediaUploadResponse(urls=urls, thumbnails=thumbnails)
