"""Form-level checks run before a file is handed to the upload pipeline."""

from __future__ import annotations

from typing import Optional

from .. import config
from ..domain.models import BinaryFile


def validate_image_file(file: Optional[BinaryFile], max_size_mb: float = config.FORM_MAX_SIZE_MB) -> str:
    """Return an error message for *file*, or an empty string when it is acceptable."""

    if file is None:
        return "Please choose an image file"
    if file.mime_type.lower() not in config.FORM_MIME_TYPES:
        return "Please choose a JPG, PNG, GIF or WebP image"
    if file.size > max_size_mb * 1024 * 1024:
        return f"Images must be {max_size_mb:g}MB or smaller"
    return ""
