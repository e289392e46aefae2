"""Image geometry, the resize-and-encode transformer and the square cropper."""

from .cropper import CropperState, ImageCropper
from .transformer import (
    compressed_filename,
    encode_image,
    is_vector,
    load_image,
    load_image_file,
    resize_to_fit,
    resize_to_square_avatar,
)

__all__ = [
    "CropperState",
    "ImageCropper",
    "compressed_filename",
    "encode_image",
    "is_vector",
    "load_image",
    "load_image_file",
    "resize_to_fit",
    "resize_to_square_avatar",
]
