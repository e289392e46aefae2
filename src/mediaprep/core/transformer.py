"""Resize-and-encode pipeline for uploaded images.

Decoding and encoding are the only slow steps; both run in the default
executor so callers on an event loop are never blocked. Each call works on
its own decoded copy, so concurrent calls share no state.
"""

from __future__ import annotations

import logging
import mimetypes
import re
import time
from io import BytesIO
from pathlib import Path
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from .. import config
from ..domain.models import AvatarOptions, BinaryFile, FitOptions, SourceImage
from ..errors import DecodeError, EncodingError, UnsupportedFormatError
from ..utils.executor import run_blocking
from .geometry import cover_layout, fit_size

LOGGER = logging.getLogger(__name__)

_EXTENSION = re.compile(r"(\.[\w-]+)$")


def _now_ms() -> int:
    return int(time.time() * 1000)


def is_vector(mime_type: Optional[str], filename: str = "") -> bool:
    """Return ``True`` for scalable formats the raster pipeline must skip."""

    if mime_type and mime_type.lower() in config.VECTOR_MIME_TYPES:
        return True
    return Path(filename).suffix.lower() in config.VECTOR_EXTENSIONS


def guess_mime_type(filename: str) -> str:
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or "application/octet-stream"


def compressed_filename(name: str, timestamp_ms: Optional[int] = None) -> str:
    """Insert ``_compressed<timestamp>`` before the extension of *name*."""

    stamp = f"_compressed{_now_ms() if timestamp_ms is None else timestamp_ms}"
    if _EXTENSION.search(name):
        return _EXTENSION.sub(lambda m: stamp + m.group(1), name)
    return name + stamp


def pillow_format(mime_type: str) -> str:
    """Return the Pillow encoder name for *mime_type*."""

    try:
        return config.ENCODER_FORMATS[mime_type.lower()]
    except KeyError:
        raise EncodingError(f"Unsupported output format: {mime_type}") from None


def pillow_quality(quality: float) -> int:
    return max(1, min(100, int(round(float(quality) * 100))))


# ---------------------------------------------------------------------------
# Blocking primitives
# ---------------------------------------------------------------------------

def _decode(data: bytes) -> Image.Image:
    try:
        with Image.open(BytesIO(data)) as img:
            img = ImageOps.exif_transpose(img)
            img.load()
            return img.copy()
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"Cannot decode image: {exc}") from exc


def _flatten_for_jpeg(image: Image.Image) -> Image.Image:
    has_alpha = image.mode in ("RGBA", "LA") or (
        image.mode == "P" and "transparency" in image.info
    )
    if has_alpha:
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, config.JPEG_BACKGROUND)
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


def encode_image_sync(image: Image.Image, output_format: str, quality: float) -> bytes:
    """Encode *image* and return the bytes; see :func:`encode_image`."""

    fmt = pillow_format(output_format)
    params: dict = {}
    if fmt == "JPEG":
        image = _flatten_for_jpeg(image)
        params = {"quality": pillow_quality(quality), "optimize": True}
    elif fmt == "WEBP":
        if image.mode not in ("RGB", "RGBA"):
            image = image.convert("RGBA")
        params = {"quality": pillow_quality(quality)}
    elif fmt == "PNG":
        params = {"optimize": True}

    buffer = BytesIO()
    try:
        image.save(buffer, format=fmt, **params)
    except (OSError, ValueError, KeyError) as exc:
        raise EncodingError(f"Encoding to {output_format} failed: {exc}") from exc
    data = buffer.getvalue()
    if not data:
        raise EncodingError(f"Encoding to {output_format} produced no data")
    return data


def _render_fit(image: Image.Image, options: FitOptions) -> tuple[bytes, tuple[int, int]]:
    size = fit_size(image.width, image.height, options.max_width, options.max_height)
    if size != image.size:
        image = image.resize(size, Image.Resampling.LANCZOS)
    return encode_image_sync(image, options.output_format, options.quality), size


def _render_avatar(image: Image.Image, options: AvatarOptions) -> bytes:
    target = options.target_size
    scaled_w, scaled_h, offset_x, offset_y = cover_layout(image.width, image.height, target)
    # The target square is a viewport over the scaled image drawn at
    # (-offset_x, -offset_y).
    scaled = image.resize((scaled_w, scaled_h), Image.Resampling.LANCZOS)
    square = scaled.crop((offset_x, offset_y, offset_x + target, offset_y + target))
    return encode_image_sync(square, options.output_format, options.quality)


# ---------------------------------------------------------------------------
# Async API
# ---------------------------------------------------------------------------

async def load_image(data: bytes, filename: str, mime_type: Optional[str] = None) -> SourceImage:
    """Decode *data* into a :class:`SourceImage`.

    Raises
    ------
    UnsupportedFormatError
        For vector inputs, which are uploaded untouched instead.
    DecodeError
        When Pillow cannot read the bytes.
    """

    mime_type = mime_type or guess_mime_type(filename)
    if is_vector(mime_type, filename):
        raise UnsupportedFormatError(f"{filename} is a vector image ({mime_type})")
    image = await run_blocking(_decode, data)
    return SourceImage(image=image, filename=filename, mime_type=mime_type, data=data)


async def load_image_file(file: BinaryFile) -> SourceImage:
    return await load_image(file.data, file.name, file.mime_type)


async def encode_image(image: Image.Image, output_format: str, quality: float) -> bytes:
    """Encode *image* as *output_format* (a MIME type) at *quality* (0..1).

    JPEG output has transparency flattened onto white. Raises
    :class:`EncodingError` if the encoder fails or produces no data.
    """

    return await run_blocking(encode_image_sync, image, output_format, quality)


async def resize_to_fit(source: SourceImage, options: Optional[FitOptions] = None) -> BinaryFile:
    """Shrink *source* to fit within the bounds and re-encode it.

    Images already inside the bounds keep their natural size. When such an
    image is already stored in the output format and re-encoding would make
    it larger, the original bytes are kept so repeated passes never grow.
    """

    options = options or FitOptions()
    data, (width, height) = await run_blocking(_render_fit, source.image, options)

    if (
        (width, height) == source.natural_size
        and source.data
        and len(data) > len(source.data)
        and _same_encoder(source.mime_type, options.output_format)
    ):
        LOGGER.debug("Re-encoding %s grew it; keeping original bytes", source.filename)
        data = source.data

    result = BinaryFile(
        name=compressed_filename(source.filename),
        mime_type=options.output_format,
        data=data,
    )
    LOGGER.info(
        "Compressed %s: %.2fKB -> %.2fKB (%dx%d)",
        source.filename,
        len(source.data) / 1024,
        result.size / 1024,
        width,
        height,
    )
    return result


async def resize_to_square_avatar(
    source: SourceImage, options: Optional[AvatarOptions] = None
) -> BinaryFile:
    """Scale *source* to cover a square and center-crop the overflow."""

    options = options or AvatarOptions()
    data = await run_blocking(_render_avatar, source.image, options)
    result = BinaryFile(
        name=compressed_filename(source.filename),
        mime_type=options.output_format,
        data=data,
    )
    LOGGER.info(
        "Avatar %s: %.2fKB -> %.2fKB (%dx%d)",
        source.filename,
        len(source.data) / 1024,
        result.size / 1024,
        options.target_size,
        options.target_size,
    )
    return result


def _same_encoder(source_mime: str, output_format: str) -> bool:
    source_fmt = config.ENCODER_FORMATS.get((source_mime or "").lower())
    return source_fmt is not None and source_fmt == config.ENCODER_FORMATS.get(output_format.lower())


__all__ = [
    "compressed_filename",
    "encode_image",
    "encode_image_sync",
    "guess_mime_type",
    "is_vector",
    "load_image",
    "load_image_file",
    "pillow_format",
    "pillow_quality",
    "resize_to_fit",
    "resize_to_square_avatar",
]
