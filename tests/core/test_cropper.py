"""Tests for the stateful square cropper."""

import asyncio

import pytest
from PIL import Image

from mediaprep.core.cropper import CropperState, ImageCropper
from mediaprep.domain.models import CropHandle, CropRect, SourceImage
from mediaprep.errors import CropError
from mediaprep.utils.datauri import data_uri_to_file

from ..conftest import decode, encode


@pytest.fixture
def cropper():
    cropper = ImageCropper()
    cropper.init((1600, 1200), (800, 600))
    return cropper


def _commit(cropper, image):
    return asyncio.run(cropper.commit(image))


def _pixel(image, point):
    return image.convert("RGB").getpixel(point)


def test_new_cropper_is_uninitialized():
    cropper = ImageCropper()
    assert cropper.state is CropperState.UNINITIALIZED
    assert cropper.crop_params is None
    assert cropper.frame is None


def test_init_places_centered_default(cropper):
    assert cropper.state is CropperState.READY
    assert cropper.crop_params == CropRect(300, 200, 200, 200)
    assert cropper.frame.scale == pytest.approx(0.5)


@pytest.mark.parametrize("natural,container", [((0, 100), (800, 600)), ((100, 100), (0, 600))])
def test_init_rejects_empty_sizes(natural, container):
    with pytest.raises(CropError):
        ImageCropper().init(natural, container)


@pytest.mark.parametrize("action", ["drag", "resize", "reset"])
def test_gestures_require_init(action):
    cropper = ImageCropper()
    with pytest.raises(CropError):
        if action == "drag":
            cropper.drag(1, 1)
        elif action == "resize":
            cropper.resize(1, 1, CropHandle.BOTTOM_RIGHT)
        else:
            cropper.reset()


def test_drag_then_reset(cropper):
    cropper.drag(-1000, -1000)
    assert cropper.crop_params == CropRect(0, 0, 200, 200)
    assert cropper.reset() == CropRect(300, 200, 200, 200)


def test_resize_accepts_handle_names(cropper):
    rect = cropper.resize(50, 0, "bottom-right")
    assert rect == CropRect(300, 200, 250, 250)


def test_resize_rejects_unknown_handle(cropper):
    with pytest.raises(CropError):
        cropper.resize(10, 10, "center")


def test_custom_minimum_size():
    cropper = ImageCropper(min_size=120)
    cropper.init((1600, 1200), (800, 600))
    rect = cropper.resize(-500, 0, CropHandle.BOTTOM_RIGHT)
    assert rect.width == rect.height == 120


def test_commit_without_image_fails(cropper):
    with pytest.raises(CropError):
        _commit(cropper, None)
    assert cropper.state is CropperState.READY


def test_commit_before_init_fails(quadrant_image):
    with pytest.raises(CropError):
        _commit(ImageCropper(), quadrant_image)


def test_commit_outputs_box_sized_jpeg(cropper, quadrant_image):
    data_uri = _commit(cropper, quadrant_image)
    assert data_uri.startswith("data:image/jpeg;base64,")
    output = decode(data_uri_to_file(data_uri, "crop.jpg").data)
    assert output.format == "JPEG"
    assert output.size == (200, 200)
    assert cropper.state is CropperState.COMMITTED


def test_commit_maps_top_left_drag_to_red_quadrant(cropper, quadrant_image):
    cropper.drag(-1000, -1000)
    output = decode(data_uri_to_file(_commit(cropper, quadrant_image), "crop.jpg").data)
    for point in [(10, 10), (100, 100), (190, 190)]:
        red, green, blue = _pixel(output, point)
        assert red > 200 and green < 60 and blue < 60


def test_commit_maps_bottom_right_drag_to_white_quadrant(cropper, quadrant_image):
    cropper.drag(1000, 1000)
    output = decode(data_uri_to_file(_commit(cropper, quadrant_image), "crop.jpg").data)
    assert all(channel > 240 for channel in _pixel(output, (100, 100)))


def test_commit_accepts_source_image(cropper, quadrant_image):
    source = SourceImage(image=quadrant_image, filename="q.png", mime_type="image/png", data=encode(quadrant_image))
    output = decode(data_uri_to_file(_commit(cropper, source), "crop.jpg").data)
    assert output.size == (200, 200)


def test_commit_rejects_image_of_another_size(cropper):
    with pytest.raises(CropError):
        _commit(cropper, Image.new("RGB", (640, 480)))


def test_committed_cropper_needs_init_again(cropper, quadrant_image):
    _commit(cropper, quadrant_image)
    with pytest.raises(CropError):
        cropper.drag(1, 1)
    cropper.init((1600, 1200), (800, 600))
    assert cropper.state is CropperState.READY


def test_to_binary_file_keeps_jpeg_type(cropper, quadrant_image):
    binary = ImageCropper.to_binary_file(_commit(cropper, quadrant_image), "avatar.jpg")
    assert binary.name == "avatar.jpg"
    assert binary.mime_type == "image/jpeg"
    assert binary.size > 0
