"""Photo storage under UPLOAD_DIR: raw photo saves and resized uploads with thumbnails."""

import io
import logging
import re
import uuid
from datetime import UTC, datetime
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

MAX_IMAGE_SIZE = (1920, 1080)
THUMBNAIL_SIZE = (200, 200)
IMAGE_QUALITY = 85
THUMBNAIL_QUALITY = 80
THUMBS_DIRNAME = "thumbs"
PUBLIC_PREFIX = "/uploads"

_EXTENSION_RE = re.compile(r"^[a-z0-9]{1,8}$")


class MediaError(Exception):
    """Raised when an uploaded file cannot be decoded as an image."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


def safe_extension(filename: str | None, default: str = "jpg") -> str:
    """Lower-case extension of filename if it is short and alphanumeric, else default."""
    if not filename or "." not in filename:
        return default
    ext = filename.rsplit(".", 1)[1].lower()
    return ext if _EXTENSION_RE.match(ext) else default


def month_dir(now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    return f"{now.year}/{now.month:02d}"


def _write(upload_root: Path, relative: str, data: bytes) -> None:
    target = upload_root / relative
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)


def save_photo(
    data: bytes,
    filename: str | None,
    upload_root: Path,
    now: datetime | None = None,
) -> str:
    """Store bytes as-is at <YYYY>/<MM>/<uuid>.<ext>; returns that relative path."""
    relative = f"{month_dir(now)}/{uuid.uuid4()}.{safe_extension(filename)}"
    _write(upload_root, relative, data)
    logger.debug("Stored photo", extra={"path": relative, "size": len(data)})
    return relative


def _encode_jpeg(image: Image.Image, quality: int) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def process_image(data: bytes) -> tuple[bytes, bytes]:
    """
    Re-encode an upload as JPEG fitted inside 1920x1080 (never enlarged) and build a
    200x200 centre-cropped thumbnail. Returns (image_bytes, thumbnail_bytes).
    """
    try:
        with Image.open(io.BytesIO(data)) as source:
            image = ImageOps.exif_transpose(source).convert("RGB")
    except (UnidentifiedImageError, OSError) as e:
        raise MediaError("Uploaded file is not a readable image.", cause=e) from e

    full = image.copy()
    full.thumbnail(MAX_IMAGE_SIZE)
    thumb = ImageOps.fit(image, THUMBNAIL_SIZE)
    return _encode_jpeg(full, IMAGE_QUALITY), _encode_jpeg(thumb, THUMBNAIL_QUALITY)


def store_image(
    data: bytes, upload_root: Path, now: datetime | None = None
) -> tuple[str, str]:
    """Process and store one image and its thumbnail; returns their public URLs."""
    image_bytes, thumb_bytes = process_image(data)
    filename = f"{uuid.uuid4()}.jpg"
    relative = f"{month_dir(now)}/{filename}"
    thumb_relative = f"{THUMBS_DIRNAME}/{filename}"
    _write(upload_root, relative, image_bytes)
    _write(upload_root, thumb_relative, thumb_bytes)
    return f"{PUBLIC_PREFIX}/{relative}", f"{PUBLIC_PREFIX}/{thumb_relative}"
