"""Filesystem-backed upload storage used by the CLI and for local testing."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..application.interfaces import IUploadBackend
from ..domain.models import BinaryFile, UploadResult
from ..utils.executor import run_blocking

LOGGER = logging.getLogger(__name__)


class LocalDirectoryBackend(IUploadBackend):
    """Store uploads below *root*, one file per destination key.

    Existing files are never overwritten. Public URLs are ``file://`` URIs
    unless *base_url* is given, in which case the key is appended to it.
    """

    def __init__(self, root: Path, base_url: Optional[str] = None):
        self._root = Path(root).resolve()
        self._base_url = base_url.rstrip("/") if base_url else None

    def _target(self, destination_key: str) -> Path:
        target = (self._root / destination_key).resolve()
        if not target.is_relative_to(self._root):
            raise ValueError(f"Destination key escapes the storage root: {destination_key}")
        return target

    def _write(self, target: Path, data: bytes) -> bool:
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            with target.open("xb") as handle:
                handle.write(data)
        except FileExistsError:
            return False
        return True

    async def upload(self, binary: BinaryFile, destination_key: str) -> UploadResult:
        try:
            target = self._target(destination_key)
        except ValueError as exc:
            return UploadResult(success=False, error=str(exc))
        try:
            written = await run_blocking(self._write, target, binary.data)
        except OSError as exc:
            LOGGER.error("Writing %s failed: %s", target, exc)
            return UploadResult(success=False, error=f"Storage error: {exc}")
        if not written:
            return UploadResult(success=False, error=f"{destination_key} already exists")

        if self._base_url:
            url = f"{self._base_url}/{destination_key}"
        else:
            url = target.as_uri()
        LOGGER.info("Stored %s (%d bytes)", target, binary.size)
        return UploadResult(success=True, public_url=url)
