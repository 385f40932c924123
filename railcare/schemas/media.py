"""Response schema for the media upload endpoint."""

from pydantic import BaseModel, Field


class MediaUploadResponse(BaseModel):
    urls: list[str] = Field(default_factory=list, description="Public URLs of the stored images")
    thumbnails: list[str] = Field(default_factory=list, description="Public URLs of 200x200 thumbnails")
