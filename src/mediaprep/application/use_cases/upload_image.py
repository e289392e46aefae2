import logging
import time
from dataclasses import dataclass
from typing import Optional

from .base import UseCase, UseCaseRequest, UseCaseResponse
from ... import config
from ...application.interfaces import IUploadBackend
from ...application.profiles import POST_PROFILE, ResizePolicy, UploadProfile
from ...core.geometry import fit_size
from ...core.transformer import is_vector, load_image_file, resize_to_fit, resize_to_square_avatar
from ...domain.models import BinaryFile
from ...errors import DecodeError, EncodingError, MediaPrepError, UploadError, ValidationError
from ...errors.handler import ErrorHandler
from ...events.bus import EventBus
from ...events.media_events import CompressionFallbackEvent, ImageProcessedEvent, ImageUploadedEvent


def user_id_hash(user_id) -> int:
    """Return the code point sum of *user_id*; keeps non-ASCII ids out of keys."""
    return sum(ord(char) for char in str(user_id))


def destination_key(bucket: str, user_id, filename: str, timestamp_ms: Optional[int] = None) -> str:
    timestamp = int(time.time() * 1000) if timestamp_ms is None else timestamp_ms
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
    return f"{bucket}/{user_id_hash(user_id)}_{timestamp}.{extension}"


@dataclass(frozen=True)
class UploadImageRequest(UseCaseRequest):
    file: Optional[BinaryFile] = None
    user_id: str = ""
    profile: UploadProfile = POST_PROFILE


@dataclass(frozen=True)
class UploadImageResponse(UseCaseResponse):
    public_url: Optional[str] = None
    destination_key: Optional[str] = None
    compressed: bool = False


class UploadImageUseCase(UseCase):
    def __init__(
        self,
        backend: IUploadBackend,
        event_bus: EventBus,
        error_handler: Optional[ErrorHandler] = None,
        fallback_to_original: bool = True,
    ):
        self._backend = backend
        self._event_bus = event_bus
        self._logger = logging.getLogger(__name__)
        self._errors = error_handler or ErrorHandler(self._logger, event_bus)
        self._fallback = fallback_to_original

    async def execute(self, request: UploadImageRequest) -> UploadImageResponse:
        profile = request.profile
        context = {"profile": profile.name, "user_id": request.user_id}
        try:
            file = self._validate(request.file, profile)
            processed, compressed = await self._process(file, profile)
        except (ValidationError, DecodeError, EncodingError) as exc:
            return self._fail(exc, context)

        key = destination_key(profile.bucket, request.user_id, processed.name)
        self._logger.info(
            "Uploading %s to %s (%d bytes, %s)", processed.name, key, processed.size, processed.mime_type
        )
        try:
            result = await self._backend.upload(processed, key)
        except (MediaPrepError, OSError) as exc:
            return self._fail(exc, {**context, "destination_key": key})
        if not result.success:
            return self._fail(UploadError(result.error or "upload failed"), {**context, "destination_key": key})

        self._event_bus.publish(ImageUploadedEvent(
            destination_key=key,
            public_url=result.public_url or "",
            size=processed.size,
        ))
        return UploadImageResponse(
            public_url=result.public_url,
            destination_key=key,
            compressed=compressed,
        )

    def _validate(self, file: Optional[BinaryFile], profile: UploadProfile) -> BinaryFile:
        if file is None or not file.data:
            raise ValidationError("Please choose a valid image file")
        if file.mime_type.lower() not in config.UPLOAD_MIME_TYPES:
            raise ValidationError(
                f"Unsupported file type {file.mime_type}; allowed: jpg, jpeg, png, gif, webp, svg"
            )
        if file.size > profile.max_upload_bytes:
            limit_mb = profile.max_upload_bytes / (1024 * 1024)
            raise ValidationError(f"Images must be {limit_mb:g}MB or smaller")
        return file

    async def _process(self, file: BinaryFile, profile: UploadProfile) -> tuple[BinaryFile, bool]:
        if is_vector(file.mime_type, file.name):
            self._logger.info("Uploading vector image %s without compression", file.name)
            return file, False
        try:
            source = await load_image_file(file)
            if profile.policy is ResizePolicy.AVATAR:
                processed = await resize_to_square_avatar(source, profile.avatar)
            else:
                processed = await resize_to_fit(source, profile.fit)
        except (DecodeError, EncodingError) as exc:
            if not self._fallback:
                raise
            self._logger.warning("Compression of %s failed, uploading original: %s", file.name, exc)
            self._event_bus.publish(CompressionFallbackEvent(filename=file.name, reason=str(exc)))
            return file, False

        if profile.policy is ResizePolicy.AVATAR:
            width = height = profile.avatar.target_size
        else:
            width, height = fit_size(
                source.natural_width, source.natural_height, profile.fit.max_width, profile.fit.max_height
            )
        self._event_bus.publish(ImageProcessedEvent(
            filename=file.name,
            policy=profile.policy.value,
            original_size=file.size,
            processed_size=processed.size,
            width=width,
            height=height,
        ))
        return processed, True

    def _fail(self, error: Exception, context: dict) -> UploadImageResponse:
        message = self._errors.handle(error, context=context)
        return UploadImageResponse.failure(message)
