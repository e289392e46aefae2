"""Schema helpers for the mediaprep settings file."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from .. import config

_QUALITY = {"type": "number", "minimum": 0, "maximum": 1}
_FORMAT = {"type": "string", "enum": sorted(config.ENCODER_FORMATS)}
_POSITIVE = {"type": "integer", "minimum": 1}

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "mediaprep/settings.schema.json",
    "type": "object",
    "required": ["schema", "fit", "avatar", "crop", "upload"],
    "properties": {
        "schema": {"const": "mediaprep/settings@1"},
        "fit": {
            "type": "object",
            "properties": {
                "max_width": _POSITIVE,
                "max_height": _POSITIVE,
                "quality": _QUALITY,
                "output_format": _FORMAT,
            },
            "additionalProperties": False,
        },
        "avatar": {
            "type": "object",
            "properties": {
                "target_size": _POSITIVE,
                "quality": _QUALITY,
                "output_format": _FORMAT,
            },
            "additionalProperties": False,
        },
        "crop": {
            "type": "object",
            "properties": {
                "min_size": {"type": "number", "exclusiveMinimum": 0},
            },
            "additionalProperties": False,
        },
        "upload": {
            "type": "object",
            "properties": {
                "max_upload_bytes": _POSITIVE,
                "fallback_to_original": {"type": "boolean"},
                "buckets": {
                    "type": "object",
                    "additionalProperties": {"type": "string", "minLength": 1},
                },
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "mediaprep/settings@1",
    "fit": {
        "max_width": config.DISPLAY_MAX_WIDTH,
        "max_height": config.DISPLAY_MAX_HEIGHT,
        "quality": config.DEFAULT_QUALITY,
        "output_format": config.DEFAULT_OUTPUT_FORMAT,
    },
    "avatar": {
        "target_size": config.AVATAR_TARGET_SIZE,
        "quality": config.DEFAULT_QUALITY,
        "output_format": config.DEFAULT_OUTPUT_FORMAT,
    },
    "crop": {
        "min_size": config.MIN_CROP_SIZE,
    },
    "upload": {
        "max_upload_bytes": config.MAX_UPLOAD_BYTES,
        "fallback_to_original": True,
        "buckets": {
            "post": config.POST_BUCKET,
            "ticket": config.TICKET_BUCKET,
            "avatar": config.AVATAR_BUCKET,
        },
    },
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            target = merged.get(key)
            if isinstance(target, dict) and isinstance(value, dict):
                for sub_key, sub_value in value.items():
                    if isinstance(target.get(sub_key), dict) and isinstance(sub_value, dict):
                        target[sub_key].update(sub_value)
                    else:
                        target[sub_key] = sub_value
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
