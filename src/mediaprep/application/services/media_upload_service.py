import logging
from typing import Mapping, Optional

from ...application.profiles import DEFAULT_PROFILES, UploadProfile
from ...application.use_cases.upload_image import (
    UploadImageRequest,
    UploadImageResponse,
    UploadImageUseCase,
)
from ...domain.models import BinaryFile
from ...errors import DecodeError
from ...utils.datauri import data_uri_to_file


class MediaUploadService:
    """
    Application Service Facade for image uploads.
    Each upload kind is the same use case run with a different profile.
    """
    def __init__(
        self,
        upload_use_case: UploadImageUseCase,
        profiles: Optional[Mapping[str, UploadProfile]] = None,
    ):
        self._upload_uc = upload_use_case
        self._profiles = dict(profiles or DEFAULT_PROFILES)
        self._logger = logging.getLogger(__name__)

    def profile(self, name: str) -> UploadProfile:
        try:
            return self._profiles[name]
        except KeyError:
            raise KeyError(f"Unknown upload profile: {name}") from None

    async def upload(self, profile_name: str, file: Optional[BinaryFile], user_id: str) -> UploadImageResponse:
        request = UploadImageRequest(file=file, user_id=user_id, profile=self.profile(profile_name))
        return await self._upload_uc.execute(request)

    async def upload_post_image(self, file: Optional[BinaryFile], user_id: str) -> UploadImageResponse:
        return await self.upload("post", file, user_id)

    async def upload_ticket_image(self, file: Optional[BinaryFile], user_id: str) -> UploadImageResponse:
        return await self.upload("ticket", file, user_id)

    async def upload_avatar(self, file: Optional[BinaryFile], user_id: str) -> UploadImageResponse:
        return await self.upload("avatar", file, user_id)

    async def upload_cropped_avatar(
        self, data_uri: str, user_id: str, filename: str = "avatar.jpg"
    ) -> UploadImageResponse:
        """Upload the data URI produced by ``ImageCropper.commit`` as an avatar.

        The crop goes through the avatar profile like any other upload, so a
        200x200 selection is stored at the profile's target size (300x300 by
        default), not at its own size.
        """
        try:
            file = data_uri_to_file(data_uri, filename)
        except DecodeError as exc:
            self._logger.error("Cropped avatar for %s is not a valid data URI: %s", user_id, exc)
            return UploadImageResponse.failure(str(exc))
        return await self.upload_avatar(file, user_id)
