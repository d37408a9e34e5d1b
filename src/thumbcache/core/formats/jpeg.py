"""JPEG decoder.

JPEG carries no transparency; CMYK and greyscale files are normalised to
RGB so they resample onto the RGB canvas unchanged.
"""

from __future__ import annotations

from pathlib import Path

from PIL import Image

from thumbcache.core.formats._base import FormatCard, open_image
from thumbcache.schemas import ImageFormat

FORMAT_CARD = FormatCard(
    format=ImageFormat.JPEG,
    # Pillow reports multi-picture camera JPEGs as MPO.
    pil_formats=("JPEG", "MPO"),
    mime="image/jpeg",
)


def decode(path: Path) -> Image.Image:
    return open_image(path, "RGB", label="JPEG")
