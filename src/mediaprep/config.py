"""Default configuration values for mediaprep."""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

# 0.8-0.85 keeps JPEG artefacts invisible at display sizes while roughly
# halving the payload of a typical phone photo.
DEFAULT_QUALITY: Final[float] = 0.82
DEFAULT_OUTPUT_FORMAT: Final[str] = "image/jpeg"

# Display images are bounded at twice their on-screen size.
DISPLAY_MAX_WIDTH: Final[int] = 700
DISPLAY_MAX_HEIGHT: Final[int] = 700
AVATAR_TARGET_SIZE: Final[int] = 300

# JPEG cannot carry alpha; transparent pixels are flattened onto this colour.
JPEG_BACKGROUND: Final[tuple[int, int, int]] = (255, 255, 255)

# MIME type -> Pillow format name for every encoder the pipeline supports.
ENCODER_FORMATS: Final[dict[str, str]] = {
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/webp": "WEBP",
    "image/png": "PNG",
}

VECTOR_MIME_TYPES: Final[frozenset[str]] = frozenset({"image/svg+xml"})
VECTOR_EXTENSIONS: Final[frozenset[str]] = frozenset({".svg", ".svgz"})

# ---------------------------------------------------------------------------
# Cropper
# ---------------------------------------------------------------------------

MIN_CROP_SIZE: Final[float] = 50.0
INITIAL_CROP_SIZE: Final[float] = 200.0
INITIAL_CROP_CONTAINER_FRACTION: Final[float] = 0.6
CROP_QUALITY: Final[float] = 0.82
CROP_OUTPUT_FORMAT: Final[str] = "image/jpeg"

# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------

UPLOAD_MIME_TYPES: Final[tuple[str, ...]] = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
)

# Form-level validation only accepts raster images.
FORM_MIME_TYPES: Final[tuple[str, ...]] = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
)

MAX_UPLOAD_BYTES: Final[int] = 15 * 1024 * 1024
FORM_MAX_SIZE_MB: Final[int] = 5

POST_BUCKET: Final[str] = "images"
TICKET_BUCKET: Final[str] = "Ticket"
AVATAR_BUCKET: Final[str] = "UserAvatar"

SETTINGS_DIR_NAME: Final[str] = "mediaprep"
