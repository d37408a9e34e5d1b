"""Shared fixtures for thumbcache test suite."""

from pathlib import Path

import numpy as np
import pytest
from PIL import Image


@pytest.fixture
def rgb_image() -> Image.Image:
    """A 400x200 RGB test image with a gradient and some noise."""
    rng = np.random.default_rng(0)
    arr = np.zeros((200, 400, 3), dtype=np.uint8)
    arr[:, :, 0] = np.linspace(0, 255, 400, dtype=np.uint8)  # red gradient
    arr[:, :, 1] = 128
    arr[:, :, 2] = rng.integers(0, 255, size=(200, 400), dtype=np.uint8)
    return Image.fromarray(arr)


@pytest.fixture
def landscape_jpeg(tmp_path: Path, rgb_image: Image.Image) -> Path:
    """A 400x200 JPEG source image."""
    path = tmp_path / "landscape.jpg"
    rgb_image.save(path, format="JPEG", quality=95)
    return path


@pytest.fixture
def portrait_png(tmp_path: Path) -> Path:
    """A 200x400 opaque RGBA PNG source image."""
    path = tmp_path / "portrait.png"
    Image.new("RGBA", (200, 400), (30, 60, 90, 255)).save(path, format="PNG")
    return path


@pytest.fixture
def blue_png(tmp_path: Path) -> Path:
    """A solid blue 200x200 PNG source image."""
    path = tmp_path / "blue.png"
    Image.new("RGB", (200, 200), (0, 0, 255)).save(path, format="PNG")
    return path


@pytest.fixture
def gray_png(tmp_path: Path) -> Path:
    """A solid mid-grey 100x100 PNG source image (value=128)."""
    path = tmp_path / "gray.png"
    Image.new("RGB", (100, 100), (128, 128, 128)).save(path, format="PNG")
    return path


@pytest.fixture
def source_gif(tmp_path: Path) -> Path:
    """A 120x60 GIF source image."""
    path = tmp_path / "source.gif"
    Image.new("RGB", (120, 60), (200, 100, 0)).save(path, format="GIF")
    return path


@pytest.fixture
def overlay_png(tmp_path: Path) -> Path:
    """A 20x20 opaque red RGBA PNG overlay."""
    path = tmp_path / "overlay.png"
    Image.new("RGBA", (20, 20), (255, 0, 0, 255)).save(path, format="PNG")
    return path


@pytest.fixture
def overlay_gif(tmp_path: Path) -> Path:
    """A 20x20 green GIF overlay."""
    path = tmp_path / "overlay.gif"
    Image.new("RGB", (20, 20), (0, 255, 0)).save(path, format="GIF")
    return path


@pytest.fixture
def bmp_file(tmp_path: Path) -> Path:
    """A valid image in a format that is not supported (BMP)."""
    path = tmp_path / "image.bmp"
    Image.new("RGB", (10, 10), (255, 255, 255)).save(path, format="BMP")
    return path


@pytest.fixture
def text_file(tmp_path: Path) -> Path:
    """A file that is not an image at all."""
    path = tmp_path / "notes.txt"
    path.write_text("definitely not pixels")
    return path


@pytest.fixture
def truncated_jpeg(tmp_path: Path, landscape_jpeg: Path) -> Path:
    """A JPEG whose header is intact but whose scan data is cut in half."""
    data = landscape_jpeg.read_bytes()
    path = tmp_path / "truncated.jpg"
    path.write_bytes(data[: len(data) // 2])
    return path


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """A not-yet-existing cache root."""
    return tmp_path / "cache"


@pytest.fixture
def camera_jpeg(tmp_path: Path) -> Path:
    """A 40x20 multi-picture JPEG, which Pillow reports as MPO."""
    path = tmp_path / "camera.jpg"
    frames = [Image.new("RGB", (40, 20), (10, 200, 30)), Image.new("RGB", (40, 20))]
    frames[0].save(path, format="MPO", save_all=True, append_images=frames[1:])
    return path
