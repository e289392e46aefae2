from .base import UseCase, UseCaseRequest, UseCaseResponse
from .upload_image import UploadImageRequest, UploadImageResponse, UploadImageUseCase

__all__ = [
    "UploadImageRequest",
    "UploadImageResponse",
    "UploadImageUseCase",
    "UseCase",
    "UseCaseRequest",
    "UseCaseResponse",
]
