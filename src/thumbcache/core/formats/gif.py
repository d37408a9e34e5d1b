"""GIF decoder.

Only the first frame is used. The palette's transparent index becomes
real alpha through the RGBA conversion.
"""

from __future__ import annotations

from pathlib import Path

from PIL import Image

from thumbcache.core.formats._base import FormatCard, open_image
from thumbcache.schemas import ImageFormat

FORMAT_CARD = FormatCard(
    format=ImageFormat.GIF,
    pil_formats=("GIF",),
    mime="image/gif",
    overlay_capable=True,
)


def decode(path: Path) -> Image.Image:
    return open_image(path, "RGBA", label="GIF")
