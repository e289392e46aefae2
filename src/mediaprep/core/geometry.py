"""
Pure geometry for image sizing and square crop interaction.

Two coordinate spaces are involved:

**Natural space**: pixel coordinates of the decoded source image.

**Container space**: coordinates of the on-screen box the image is shown in.
The image is letterboxed into the container (scaled to fit, centered), which
is described by a :class:`GeometryFrame`. Crop rectangles live in container
space and are mapped back to natural space only when pixels are extracted.

Every function here is side-effect free and returns new values, so the
stateful cropper is a thin wrapper that simply stores the latest results.
"""

from __future__ import annotations

import math

from .. import config
from ..domain.models import CropHandle, CropRect, GeometryFrame

# Absorbs floating point error such as 3000 * (700 / 3000) == 699.9999...
_FLOOR_EPSILON = 1e-6


def _floor(value: float) -> int:
    return int(math.floor(value + _FLOOR_EPSILON))


def fit_size(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """Return the letterbox-fit size of ``width x height`` within the bounds.

    Images already inside the bounds are returned unchanged (no upscaling).
    """

    if width <= 0 or height <= 0:
        raise ValueError(f"image dimensions must be positive, got {width}x{height}")
    if width <= max_width and height <= max_height:
        return width, height
    ratio = min(max_width / width, max_height / height)
    return max(1, _floor(width * ratio)), max(1, _floor(height * ratio))


def cover_layout(width: int, height: int, target: int) -> tuple[int, int, int, int]:
    """Return ``(scaled_w, scaled_h, offset_x, offset_y)`` for a cover fill.

    Uses ``max`` of the two axis ratios so the scaled image covers the whole
    ``target x target`` square; the offsets center the overflow.
    """

    if width <= 0 or height <= 0:
        raise ValueError(f"image dimensions must be positive, got {width}x{height}")
    scale = max(target / width, target / height)
    scaled_width = max(target, _floor(width * scale))
    scaled_height = max(target, _floor(height * scale))
    offset_x = (scaled_width - target) // 2
    offset_y = (scaled_height - target) // 2
    return scaled_width, scaled_height, offset_x, offset_y


def compute_frame(
    natural_size: tuple[float, float],
    container_size: tuple[float, float],
) -> GeometryFrame:
    """Letterbox *natural_size* into *container_size*.

    Parameters
    ----------
    natural_size:
        ``(width, height)`` of the source image in pixels.
    container_size:
        ``(width, height)`` of the rendered container.
    """

    natural_width, natural_height = (float(v) for v in natural_size)
    container_width, container_height = (float(v) for v in container_size)
    if natural_width <= 0 or natural_height <= 0:
        raise ValueError("natural size must be positive")
    if container_width <= 0 or container_height <= 0:
        raise ValueError("container size must be positive")

    scale = min(container_width / natural_width, container_height / natural_height)
    display_width = natural_width * scale
    display_height = natural_height * scale
    return GeometryFrame(
        natural_width=natural_width,
        natural_height=natural_height,
        container_width=container_width,
        container_height=container_height,
        display_width=display_width,
        display_height=display_height,
        offset_x=(container_width - display_width) / 2,
        offset_y=(container_height - display_height) / 2,
        scale=scale,
    )


def initial_crop_rect(frame: GeometryFrame) -> CropRect:
    """Return the default crop: a square centered in the container."""

    size = min(
        config.INITIAL_CROP_SIZE,
        frame.container_width * config.INITIAL_CROP_CONTAINER_FRACTION,
        frame.container_height * config.INITIAL_CROP_CONTAINER_FRACTION,
        # Narrow images would otherwise start with the box hanging off them.
        frame.display_width,
        frame.display_height,
    )
    return CropRect(
        x=(frame.container_width - size) / 2,
        y=(frame.container_height - size) / 2,
        width=size,
        height=size,
    )


def clamp_origin(frame: GeometryFrame, x: float, y: float, size: float) -> tuple[float, float]:
    """Clamp the origin of a ``size`` square so it stays on the displayed image."""

    min_x = frame.offset_x
    min_y = frame.offset_y
    max_x = frame.offset_x + frame.display_width - size
    max_y = frame.offset_y + frame.display_height - size
    return max(min_x, min(x, max_x)), max(min_y, min(y, max_y))


def drag_crop(frame: GeometryFrame, rect: CropRect, delta_x: float, delta_y: float) -> CropRect:
    """Translate *rect* by the pointer delta, keeping it on the image."""

    x, y = clamp_origin(frame, rect.x + delta_x, rect.y + delta_y, rect.width)
    return CropRect(x=x, y=y, width=rect.width, height=rect.height)


def resize_crop(
    frame: GeometryFrame,
    rect: CropRect,
    delta_x: float,
    delta_y: float,
    handle: CropHandle | str,
    min_size: float = config.MIN_CROP_SIZE,
) -> CropRect:
    """Resize *rect* by dragging one of its corners.

    The dominant drag axis decides a single size delta so the box stays
    square. The corner opposite *handle* is anchored, then the box is pushed
    back onto the image and finally shrunk to whatever room is left.
    """

    handle = CropHandle(handle)
    adjusted_x = -delta_x if handle.is_left else delta_x
    adjusted_y = -delta_y if handle.is_top else delta_y
    delta_size = adjusted_x if abs(adjusted_x) > abs(adjusted_y) else adjusted_y

    max_size = min(frame.container_width, frame.container_height)
    new_size = max(min_size, min(rect.width + delta_size, max_size))

    new_x = rect.x
    new_y = rect.y
    if handle.is_left:
        new_x += rect.width - new_size
    if handle.is_top:
        new_y += rect.height - new_size
    new_x, new_y = clamp_origin(frame, new_x, new_y, new_size)

    available_width = frame.display_width - (new_x - frame.offset_x)
    available_height = frame.display_height - (new_y - frame.offset_y)
    new_size = min(new_size, available_width, available_height)
    return CropRect(x=new_x, y=new_y, width=new_size, height=new_size)


def crop_source_box(frame: GeometryFrame, rect: CropRect) -> tuple[float, float, float, float]:
    """Map *rect* to a ``(left, top, right, bottom)`` box in natural pixels."""

    left = (rect.x - frame.offset_x) / frame.scale
    top = (rect.y - frame.offset_y) / frame.scale
    right = left + rect.width / frame.scale
    bottom = top + rect.height / frame.scale
    return (
        max(0.0, left),
        max(0.0, top),
        min(frame.natural_width, right),
        min(frame.natural_height, bottom),
    )


__all__ = [
    "clamp_origin",
    "compute_frame",
    "cover_layout",
    "crop_source_box",
    "drag_crop",
    "fit_size",
    "initial_crop_rect",
    "resize_crop",
]
