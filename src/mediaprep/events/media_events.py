from dataclasses import dataclass

from .bus import Event


@dataclass(kw_only=True)
class ImageProcessedEvent(Event):
    filename: str
    policy: str
    original_size: int
    processed_size: int
    width: int
    height: int


@dataclass(kw_only=True)
class CompressionFallbackEvent(Event):
    filename: str
    reason: str


@dataclass(kw_only=True)
class ImageUploadedEvent(Event):
    destination_key: str
    public_url: str
    size: int
