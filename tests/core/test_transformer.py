"""Tests for the resize-and-encode transformer."""

import asyncio
import re
from io import BytesIO

import pytest
from PIL import Image

from mediaprep.core.transformer import (
    compressed_filename,
    encode_image,
    is_vector,
    load_image,
    pillow_quality,
    resize_to_fit,
    resize_to_square_avatar,
)
from mediaprep.domain.models import AvatarOptions, FitOptions
from mediaprep.errors import DecodeError, EncodingError, UnsupportedFormatError

from ..conftest import decode, encode, gradient_image


def _load(data: bytes, name: str = "photo.png", mime: str | None = None):
    return asyncio.run(load_image(data, name, mime))


def test_resize_to_fit_scenario_wide_image(image_bytes):
    source = _load(image_bytes(3000, 1500))
    result = asyncio.run(resize_to_fit(source, FitOptions(max_width=700, max_height=700)))
    assert decode(result.data).size == (700, 350)
    assert result.mime_type == "image/jpeg"


def test_resize_to_fit_tall_image_hits_height_bound(image_bytes):
    source = _load(image_bytes(1200, 1600))
    result = asyncio.run(resize_to_fit(source))
    assert decode(result.data).size == (525, 700)


def test_resize_to_fit_does_not_upscale(image_bytes):
    source = _load(image_bytes(300, 200))
    result = asyncio.run(resize_to_fit(source))
    assert decode(result.data).size == (300, 200)


def test_resize_to_fit_leaves_source_untouched(image_bytes):
    source = _load(image_bytes(1400, 1400))
    asyncio.run(resize_to_fit(source))
    assert source.natural_size == (1400, 1400)


def test_resize_to_fit_names_output_after_input(image_bytes):
    source = _load(image_bytes(800, 800), "holiday.png")
    result = asyncio.run(resize_to_fit(source))
    assert re.fullmatch(r"holiday_compressed\d+\.png", result.name)


def test_reencoding_compressed_image_does_not_grow(image_bytes):
    first_source = _load(image_bytes(1600, 1200, fmt="JPEG", quality=95), "shot.jpg", "image/jpeg")
    first = asyncio.run(resize_to_fit(first_source))
    second_source = _load(first.data, first.name, first.mime_type)
    second = asyncio.run(resize_to_fit(second_source))
    assert second.size <= first.size
    assert decode(second.data).size == decode(first.data).size


def test_lower_quality_gives_smaller_output(image_bytes):
    source = _load(image_bytes(900, 900))
    low = asyncio.run(resize_to_fit(source, FitOptions(quality=0.3)))
    high = asyncio.run(resize_to_fit(source, FitOptions(quality=0.95)))
    assert low.size < high.size


def test_webp_output(image_bytes):
    source = _load(image_bytes(1000, 500))
    result = asyncio.run(resize_to_fit(source, FitOptions(output_format="image/webp")))
    image = decode(result.data)
    assert image.format == "WEBP"
    assert image.size == (700, 350)


@pytest.mark.parametrize("size", [(300, 300), (1920, 1080), (1080, 1920), (120, 80), (301, 4000)])
def test_avatar_is_exact_square(image_bytes, size):
    source = _load(image_bytes(*size))
    result = asyncio.run(resize_to_square_avatar(source))
    assert decode(result.data).size == (300, 300)


def test_avatar_custom_size(image_bytes):
    source = _load(image_bytes(640, 480))
    result = asyncio.run(resize_to_square_avatar(source, AvatarOptions(target_size=128)))
    assert decode(result.data).size == (128, 128)


def test_avatar_keeps_the_center_band():
    bands = Image.new("RGB", (900, 300))
    bands.paste((255, 0, 0), (0, 0, 300, 300))
    bands.paste((0, 255, 0), (300, 0, 600, 300))
    bands.paste((0, 0, 255), (600, 0, 900, 300))
    source = _load(encode(bands), "bands.png")

    result = decode(asyncio.run(resize_to_square_avatar(source)).data).convert("RGB")

    for point in [(150, 150), (20, 20), (280, 280)]:
        red, green, blue = result.getpixel(point)
        assert green > 200 and red < 60 and blue < 60


def test_transparency_is_flattened_to_white():
    clear = Image.new("RGBA", (40, 40), (0, 0, 0, 0))
    source = _load(encode(clear), "clear.png")
    result = decode(asyncio.run(resize_to_fit(source)).data)
    assert result.mode == "RGB"
    assert all(channel > 245 for channel in result.getpixel((20, 20)))


def test_palette_image_is_encoded(image_bytes):
    palette = gradient_image(200, 100).convert("P")
    source = _load(encode(palette, "GIF"), "palette.gif", "image/gif")
    result = asyncio.run(resize_to_fit(source))
    assert decode(result.data).size == (200, 100)


def test_exif_orientation_is_applied():
    exif = Image.Exif()
    exif[0x0112] = 6
    data = encode(gradient_image(200, 100), "JPEG", exif=exif)
    source = _load(data, "rotated.jpg", "image/jpeg")
    assert source.natural_size == (100, 200)


def test_load_image_rejects_garbage():
    with pytest.raises(DecodeError):
        _load(b"definitely not an image", "broken.jpg", "image/jpeg")


def test_load_image_rejects_truncated_file(image_bytes):
    data = image_bytes(400, 400, fmt="JPEG")
    with pytest.raises(DecodeError):
        _load(data[: len(data) // 3], "truncated.jpg", "image/jpeg")


@pytest.mark.parametrize(
    "name,mime",
    [("logo.svg", "image/svg+xml"), ("logo.svg", None), ("LOGO.SVG", "application/octet-stream")],
)
def test_load_image_routes_vectors_around(name, mime):
    with pytest.raises(UnsupportedFormatError):
        _load(b"<svg xmlns='http://www.w3.org/2000/svg'/>", name, mime)


def test_unknown_output_format_is_an_encoding_error(image_bytes):
    source = _load(image_bytes(100, 100))
    with pytest.raises(EncodingError):
        asyncio.run(resize_to_fit(source, FitOptions(output_format="image/bmp")))


def test_encode_image_jpeg_bytes():
    data = asyncio.run(encode_image(gradient_image(64, 32), "image/jpeg", 0.82))
    assert data[:2] == b"\xff\xd8"
    assert Image.open(BytesIO(data)).size == (64, 32)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("photo.jpg", "photo_compressed42.jpg"),
        ("archive.tar.png", "archive.tar_compressed42.png"),
        ("blob", "blob_compressed42"),
        ("my-file_1.webp", "my-file_1_compressed42.webp"),
    ],
)
def test_compressed_filename(name, expected):
    assert compressed_filename(name, 42) == expected


def test_is_vector():
    assert is_vector("image/svg+xml")
    assert is_vector(None, "icon.svg")
    assert not is_vector("image/png", "icon.png")


@pytest.mark.parametrize("quality,expected", [(0.82, 82), (0.0, 1), (1.0, 100), (0.555, 56)])
def test_pillow_quality(quality, expected):
    assert pillow_quality(quality) == expected


def test_options_reject_bad_values():
    with pytest.raises(ValueError):
        FitOptions(quality=1.5)
    with pytest.raises(ValueError):
        FitOptions(max_width=0)
    with pytest.raises(ValueError):
        AvatarOptions(target_size=-1)
