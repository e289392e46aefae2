"""Settings file management with schema validation."""

from __future__ import annotations

import json
import os
import sys
from copy import deepcopy
from pathlib import Path
from typing import Any

from jsonschema import ValidationError as SchemaValidationError

from .. import config
from ..application.profiles import ResizePolicy, UploadProfile
from ..domain.models import AvatarOptions, FitOptions
from ..errors import SettingsLoadError, SettingsValidationError
from ..utils.jsonio import read_json, write_json
from .schema import DEFAULT_SETTINGS, merge_with_defaults, validate_settings


def default_settings_path() -> Path:
    """Return the default settings.json location for the current platform."""

    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / config.SETTINGS_DIR_NAME / "settings.json"
        return Path.home() / "AppData" / "Roaming" / config.SETTINGS_DIR_NAME / "settings.json"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / config.SETTINGS_DIR_NAME / "settings.json"
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / config.SETTINGS_DIR_NAME / "settings.json"
    return Path.home() / ".config" / config.SETTINGS_DIR_NAME / "settings.json"


class SettingsManager:
    """Load, validate and persist image pipeline settings."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._data: dict[str, Any] = deepcopy(DEFAULT_SETTINGS)

    @property
    def path(self) -> Path:
        return self._path or default_settings_path()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Load the settings JSON from disk; missing files yield defaults."""

        path = self.path
        payload = None
        if path.exists():
            try:
                payload = read_json(path)
            except (OSError, json.JSONDecodeError) as exc:
                raise SettingsLoadError(f"{path}: {exc}") from exc
            if not isinstance(payload, dict):
                raise SettingsLoadError(f"{path}: top level must be an object")
        try:
            self._data = merge_with_defaults(payload)
        except SchemaValidationError as exc:
            raise SettingsValidationError(exc.message) from exc

    def save(self) -> None:
        write_json(self.path, self._data)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------
    def get(self, key: str, default: Any | None = None) -> Any:
        """Return the value for *key*, supporting dotted access for nested keys."""

        target = self._data
        parts = key.split(".")
        for index, part in enumerate(parts):
            if not isinstance(target, dict) or part not in target:
                return default
            value = target[part]
            if index == len(parts) - 1:
                return value
            target = value
        return default

    def set(self, key: str, value: Any) -> None:
        """Assign *value* to dotted *key*, rejecting values the schema refuses."""

        candidate = deepcopy(self._data)
        target = candidate
        parts = key.split(".")
        for part in parts[:-1]:
            target = target.setdefault(part, {})
            if not isinstance(target, dict):
                raise SettingsValidationError(f"{part} is not a section")
        target[parts[-1]] = value
        try:
            validate_settings(candidate)
        except SchemaValidationError as exc:
            raise SettingsValidationError(exc.message) from exc
        self._data = candidate

    def fit_options(self) -> FitOptions:
        return FitOptions(**self._data["fit"])

    def avatar_options(self) -> AvatarOptions:
        return AvatarOptions(**self._data["avatar"])

    def min_crop_size(self) -> float:
        return float(self._data["crop"]["min_size"])

    def fallback_to_original(self) -> bool:
        return bool(self._data["upload"]["fallback_to_original"])

    def profiles(self) -> dict[str, UploadProfile]:
        """Return upload profiles built from the configured options and buckets."""

        upload = self._data["upload"]
        buckets = upload["buckets"]
        fit = self.fit_options()
        avatar = self.avatar_options()
        profiles = {}
        for name, bucket in buckets.items():
            policy = ResizePolicy.AVATAR if name == "avatar" else ResizePolicy.FIT
            profiles[name] = UploadProfile(
                name=name,
                bucket=bucket,
                policy=policy,
                fit=fit,
                avatar=avatar,
                max_upload_bytes=upload["max_upload_bytes"],
            )
        return profiles
