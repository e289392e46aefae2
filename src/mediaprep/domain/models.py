"""Value objects shared by the transformer, the cropper and the upload pipeline."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from PIL import Image

from .. import config


def _now_ms() -> int:
    return int(time.time() * 1000)


def _check_quality(quality: float) -> None:
    if not 0.0 <= float(quality) <= 1.0:
        raise ValueError(f"quality must be within [0.0, 1.0], got {quality!r}")


@dataclass(frozen=True)
class FitOptions:
    """Options for the fit-within-bounds policy used for display images."""

    max_width: int = config.DISPLAY_MAX_WIDTH
    max_height: int = config.DISPLAY_MAX_HEIGHT
    quality: float = config.DEFAULT_QUALITY
    output_format: str = config.DEFAULT_OUTPUT_FORMAT

    def __post_init__(self) -> None:
        if self.max_width <= 0 or self.max_height <= 0:
            raise ValueError("max_width and max_height must be positive")
        _check_quality(self.quality)


@dataclass(frozen=True)
class AvatarOptions:
    """Options for the fill-and-center-crop policy used for avatars."""

    target_size: int = config.AVATAR_TARGET_SIZE
    quality: float = config.DEFAULT_QUALITY
    output_format: str = config.DEFAULT_OUTPUT_FORMAT

    def __post_init__(self) -> None:
        if self.target_size <= 0:
            raise ValueError("target_size must be positive")
        _check_quality(self.quality)


@dataclass(frozen=True)
class BinaryFile:
    """A named, typed byte buffer.

    Used both for files selected by the user and for the encoded output of the
    transformer and the cropper.
    """

    name: str
    mime_type: str
    data: bytes
    last_modified: int = field(default_factory=_now_ms)

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        """Lower-cased extension without the dot, or an empty string."""
        return Path(self.name).suffix.lstrip(".").lower()


@dataclass(frozen=True)
class SourceImage:
    """A decoded raster together with the encoded bytes it came from."""

    image: Image.Image
    filename: str
    mime_type: str
    data: bytes

    @property
    def natural_width(self) -> int:
        return self.image.width

    @property
    def natural_height(self) -> int:
        return self.image.height

    @property
    def natural_size(self) -> tuple[int, int]:
        return self.image.size


@dataclass(frozen=True)
class GeometryFrame:
    """Letterboxed placement of an image inside a container."""

    natural_width: float
    natural_height: float
    container_width: float
    container_height: float
    display_width: float
    display_height: float
    offset_x: float
    offset_y: float
    scale: float


@dataclass(frozen=True)
class CropRect:
    """Square crop selection in container coordinates."""

    x: float
    y: float
    width: float
    height: float

    def as_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


class CropHandle(str, enum.Enum):
    """Corner handles of the crop box."""

    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"

    @property
    def is_left(self) -> bool:
        return self in (CropHandle.TOP_LEFT, CropHandle.BOTTOM_LEFT)

    @property
    def is_top(self) -> bool:
        return self in (CropHandle.TOP_LEFT, CropHandle.TOP_RIGHT)


@dataclass(frozen=True)
class UploadResult:
    """Outcome reported by an upload backend."""

    success: bool
    public_url: Optional[str] = None
    error: Optional[str] = None
