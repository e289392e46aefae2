"""
Interactive square cropper.

:class:`ImageCropper` is the stateful boundary around the pure functions in
:mod:`mediaprep.core.geometry`. It stores the current frame and crop
rectangle and walks the lifecycle::

    UNINITIALIZED --init--> READY --drag/resize/reset--> READY --commit--> COMMITTED

A committed cropper must be initialised again before it can be reused.
"""

from __future__ import annotations

import enum
import logging
from typing import Optional, Union

from PIL import Image

from .. import config
from ..domain.models import CropHandle, CropRect, GeometryFrame, SourceImage
from ..errors import CropError
from ..utils.datauri import data_uri_to_file, to_data_uri
from ..utils.executor import run_blocking
from . import geometry
from .transformer import encode_image_sync

LOGGER = logging.getLogger(__name__)


class CropperState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    COMMITTED = "committed"


def _extract(image: Image.Image, box: tuple[float, float, float, float], size: tuple[int, int]) -> str:
    region = image.resize(size, Image.Resampling.LANCZOS, box=box)
    data = encode_image_sync(region, config.CROP_OUTPUT_FORMAT, config.CROP_QUALITY)
    return to_data_uri(data, config.CROP_OUTPUT_FORMAT)


class ImageCropper:
    """Square crop selection over a letterboxed image."""

    def __init__(self, min_size: float = config.MIN_CROP_SIZE) -> None:
        self._min_size = float(min_size)
        self._frame: Optional[GeometryFrame] = None
        self._rect: Optional[CropRect] = None
        self._state = CropperState.UNINITIALIZED

    @property
    def state(self) -> CropperState:
        return self._state

    @property
    def frame(self) -> Optional[GeometryFrame]:
        return self._frame

    @property
    def crop_params(self) -> Optional[CropRect]:
        """Return the current crop rectangle in container coordinates."""
        return self._rect

    def _require_ready(self, action: str) -> tuple[GeometryFrame, CropRect]:
        if self._state is not CropperState.READY or self._frame is None or self._rect is None:
            raise CropError(f"Cannot {action}: cropper is {self._state.value}, call init() first")
        return self._frame, self._rect

    def init(
        self,
        natural_size: tuple[float, float],
        container_size: tuple[float, float],
    ) -> CropRect:
        """Lay the image out in the container and place the default crop."""

        try:
            self._frame = geometry.compute_frame(natural_size, container_size)
        except ValueError as exc:
            raise CropError(str(exc)) from exc
        self._rect = geometry.initial_crop_rect(self._frame)
        self._state = CropperState.READY
        LOGGER.debug("Cropper ready: frame=%s rect=%s", self._frame, self._rect)
        return self._rect

    def reset(self) -> CropRect:
        """Restore the centered default crop without recomputing the frame."""

        frame, _ = self._require_ready("reset")
        self._rect = geometry.initial_crop_rect(frame)
        return self._rect

    def drag(self, delta_x: float, delta_y: float) -> CropRect:
        frame, rect = self._require_ready("drag")
        self._rect = geometry.drag_crop(frame, rect, delta_x, delta_y)
        return self._rect

    def resize(self, delta_x: float, delta_y: float, handle: Union[CropHandle, str]) -> CropRect:
        frame, rect = self._require_ready("resize")
        try:
            handle = CropHandle(handle)
        except ValueError as exc:
            raise CropError(f"Unknown crop handle: {handle!r}") from exc
        self._rect = geometry.resize_crop(frame, rect, delta_x, delta_y, handle, self._min_size)
        return self._rect

    async def commit(self, image: Union[SourceImage, Image.Image, None]) -> str:
        """Extract the selected square from *image* as a JPEG data URI.

        The output is as large as the crop box on screen; the source region
        is the box mapped back through the frame's scale.
        """

        if image is None:
            raise CropError("No image to crop")
        frame, rect = self._require_ready("commit")
        pil_image = image.image if isinstance(image, SourceImage) else image
        if (round(frame.natural_width), round(frame.natural_height)) != pil_image.size:
            raise CropError(
                f"Image is {pil_image.width}x{pil_image.height} but the cropper was "
                f"initialised for {frame.natural_width:g}x{frame.natural_height:g}"
            )

        box = geometry.crop_source_box(frame, rect)
        size = (max(1, int(rect.width)), max(1, int(rect.height)))
        data_uri = await run_blocking(_extract, pil_image, box, size)
        self._state = CropperState.COMMITTED
        LOGGER.info("Cropped %s px region to %dx%d", tuple(round(v) for v in box), *size)
        return data_uri

    to_binary_file = staticmethod(data_uri_to_file)


__all__ = ["CropperState", "ImageCropper"]
