"""Image preparation for community uploads: display resizing, avatars and square crops."""

__version__ = "0.1.0"
