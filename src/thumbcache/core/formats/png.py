"""PNG decoder.

Decoded to RGBA so transparent regions blend onto the canvas, which is
also what makes PNG usable as an overlay.
"""

from __future__ import annotations

from pathlib import Path

from PIL import Image

from thumbcache.core.formats._base import FormatCard, open_image
from thumbcache.schemas import ImageFormat

FORMAT_CARD = FormatCard(
    format=ImageFormat.PNG,
    pil_formats=("PNG",),
    mime="image/png",
    overlay_capable=True,
)


def decode(path: Path) -> Image.Image:
    return open_image(path, "RGBA", label="PNG")
