"""Custom exception hierarchy for mediaprep."""

from __future__ import annotations


class MediaPrepError(Exception):
    """Base class for all custom errors raised by mediaprep."""


# --- Image pipeline errors ---

class DecodeError(MediaPrepError):
    """Raised when an input image cannot be decoded."""


class EncodingError(MediaPrepError):
    """Raised when rendering or encoding produces no output data."""


class UnsupportedFormatError(MediaPrepError):
    """Raised for inputs (vector formats) that bypass raster processing."""


class CropError(MediaPrepError):
    """Raised when the cropper is used out of order or without an image."""


# --- Upload errors ---

class ValidationError(MediaPrepError):
    """Raised when a file fails type or size validation before upload."""


class UploadError(MediaPrepError):
    """Raised when a storage backend rejects an upload."""


# --- Settings errors ---

class SettingsError(MediaPrepError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""


__all__ = [
    "CropError",
    "DecodeError",
    "EncodingError",
    "MediaPrepError",
    "SettingsError",
    "SettingsLoadError",
    "SettingsValidationError",
    "UnsupportedFormatError",
    "UploadError",
    "ValidationError",
]
