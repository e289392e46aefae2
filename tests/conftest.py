import sys
from io import BytesIO
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Allow running the suite from a checkout without installing the package.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def gradient_image(width: int, height: int, seed: int = 0) -> Image.Image:
    """Return an RGB gradient with mild noise, sized like a real photo."""
    rng = np.random.default_rng(seed)
    xs = np.broadcast_to(np.linspace(0, 255, width)[None, :], (height, width))
    ys = np.broadcast_to(np.linspace(0, 255, height)[:, None], (height, width))
    base = np.stack([xs, ys, np.full((height, width), 128.0)], axis=-1)
    noisy = base + rng.normal(0.0, 12.0, size=(height, width, 3))
    return Image.fromarray(np.clip(noisy, 0, 255).astype(np.uint8))


def encode(image: Image.Image, fmt: str = "PNG", **params) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format=fmt, **params)
    return buffer.getvalue()


def decode(data: bytes) -> Image.Image:
    """Open and fully load *data*, keeping the detected ``format``."""
    img = Image.open(BytesIO(data))
    img.load()
    return img


@pytest.fixture
def image_bytes():
    """Factory producing encoded gradient images."""

    def _make(width: int, height: int, fmt: str = "PNG", seed: int = 0, **params) -> bytes:
        return encode(gradient_image(width, height, seed), fmt, **params)

    return _make


@pytest.fixture
def quadrant_image():
    """1600x1200 image whose quadrants are red, green, blue and white."""
    image = Image.new("RGB", (1600, 1200))
    image.paste((255, 0, 0), (0, 0, 800, 600))
    image.paste((0, 255, 0), (800, 0, 1600, 600))
    image.paste((0, 0, 255), (0, 600, 800, 1200))
    image.paste((255, 255, 255), (800, 600, 1600, 1200))
    return image


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep the user's real settings.json out of every test."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
