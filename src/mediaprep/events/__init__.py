from .bus import Event, EventBus, Subscription
from .media_events import CompressionFallbackEvent, ImageProcessedEvent, ImageUploadedEvent

__all__ = [
    "CompressionFallbackEvent",
    "Event",
    "EventBus",
    "ImageProcessedEvent",
    "ImageUploadedEvent",
    "Subscription",
]
