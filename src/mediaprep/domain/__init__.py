from .models import (
    AvatarOptions,
    BinaryFile,
    CropHandle,
    CropRect,
    FitOptions,
    GeometryFrame,
    SourceImage,
    UploadResult,
)

__all__ = [
    "AvatarOptions",
    "BinaryFile",
    "CropHandle",
    "CropRect",
    "FitOptions",
    "GeometryFrame",
    "SourceImage",
    "UploadResult",
]
