"""Upload validation and image measurement for screenshots.

Dimensions are read with Pillow after applying EXIF orientation, so a rotated
phone screenshot reports the size the user actually sees.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

# Pillow format name -> MIME type we accept for it.
FORMAT_CONTENT_TYPES = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
}


class ImageValidationError(ValueError):
    """Raised for uploads that cannot be analyzed; the message is user-facing."""


@dataclass(frozen=True)
class ImageInfo:
    width: int
    height: int
    content_type: str


def validate_upload(
    content: Optional[bytes],
    content_type: Optional[str],
    *,
    allowed_types: Iterable[str],
    max_bytes: int,
) -> None:
    """Cheap checks done before decoding: presence, declared type and size."""
    if content is None:
        raise ImageValidationError("Missing file")
    if not content_type or content_type.lower() not in {t.lower() for t in allowed_types}:
        raise ImageValidationError("Unsupported file type")
    if len(content) > max_bytes:
        raise ImageValidationError("File too large")
    if not content:
        raise ImageValidationError("Empty file")


def measure_image(content: bytes, filename: Optional[str] = None) -> ImageInfo:
    """Decode *content* and return its oriented dimensions and detected type."""
    try:
        with Image.open(io.BytesIO(content)) as img:
            fmt = img.format or ""
            oriented = ImageOps.exif_transpose(img)
            width, height = oriented.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        logger.warning("Could not decode image %s: %s", filename, exc)
        raise ImageValidationError("Could not read image") from exc

    detected = FORMAT_CONTENT_TYPES.get(fmt.upper())
    if detected is None:
        raise ImageValidationError("Unsupported file type")
    if width <= 0 or height <= 0:
        raise ImageValidationError("Could not read image")
    return ImageInfo(width=width, height=height, content_type=detected)
