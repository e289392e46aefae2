import asyncio

import pytest

from mediaprep.domain.models import BinaryFile
from mediaprep.infrastructure.local_storage import LocalDirectoryBackend


def _upload(backend, key, data=b"payload"):
    return asyncio.run(backend.upload(BinaryFile(name="f.jpg", mime_type="image/jpeg", data=data), key))


def test_upload_writes_file_and_returns_file_uri(tmp_path):
    backend = LocalDirectoryBackend(tmp_path)
    result = _upload(backend, "images/1_2.jpg")
    target = tmp_path / "images" / "1_2.jpg"
    assert result.success
    assert target.read_bytes() == b"payload"
    assert result.public_url == target.resolve().as_uri()


def test_upload_uses_base_url(tmp_path):
    backend = LocalDirectoryBackend(tmp_path, "https://cdn.example.com/media/")
    result = _upload(backend, "UserAvatar/7_8.png")
    assert result.public_url == "https://cdn.example.com/media/UserAvatar/7_8.png"


def test_existing_key_is_not_overwritten(tmp_path):
    backend = LocalDirectoryBackend(tmp_path)
    assert _upload(backend, "images/a.jpg", b"first").success
    result = _upload(backend, "images/a.jpg", b"second")
    assert not result.success
    assert "already exists" in result.error
    assert (tmp_path / "images" / "a.jpg").read_bytes() == b"first"


@pytest.mark.parametrize("key", ["../escape.jpg", "images/../../escape.jpg"])
def test_keys_cannot_escape_root(tmp_path, key):
    root = tmp_path / "store"
    result = _upload(LocalDirectoryBackend(root), key)
    assert not result.success
    assert not (tmp_path / "escape.jpg").exists()


def test_storage_error_is_reported(tmp_path):
    (tmp_path / "images").write_text("a file where a directory should be")
    result = _upload(LocalDirectoryBackend(tmp_path), "images/a.jpg")
    assert not result.success
    assert result.error.startswith("Storage error")
