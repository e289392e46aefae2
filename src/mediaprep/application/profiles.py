"""Upload profiles: which bucket an image goes to and how it is resized."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from .. import config
from ..domain.models import AvatarOptions, FitOptions


class ResizePolicy(str, enum.Enum):
    FIT = "fit"
    AVATAR = "avatar"


@dataclass(frozen=True)
class UploadProfile:
    name: str
    bucket: str
    policy: ResizePolicy = ResizePolicy.FIT
    fit: FitOptions = field(default_factory=FitOptions)
    avatar: AvatarOptions = field(default_factory=AvatarOptions)
    max_upload_bytes: int = config.MAX_UPLOAD_BYTES


POST_PROFILE = UploadProfile(name="post", bucket=config.POST_BUCKET)
TICKET_PROFILE = UploadProfile(name="ticket", bucket=config.TICKET_BUCKET)
AVATAR_PROFILE = UploadProfile(
    name="avatar", bucket=config.AVATAR_BUCKET, policy=ResizePolicy.AVATAR
)

DEFAULT_PROFILES: dict[str, UploadProfile] = {
    profile.name: profile for profile in (POST_PROFILE, TICKET_PROFILE, AVATAR_PROFILE)
}
