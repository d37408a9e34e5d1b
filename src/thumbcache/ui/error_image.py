"""Render a failure as a small diagnostic PNG.

A thumbnail URL is usually embedded in an ``<img>`` tag, where a text
error response would be invisible. The front end shows this image instead.
"""

from __future__ import annotations

import io
from contextlib import closing

from PIL import Image, ImageDraw, ImageFont

from thumbcache.config import Settings

_TITLE_COLOR = (255, 0, 0)
_TEXT_COLOR = (255, 255, 255)
_MARGIN = 2
_TITLE_HEIGHT = 14
_LINE_HEIGHT = 12


def image_to_png_bytes(image: Image.Image) -> bytes:
    """Serialize a PIL image to PNG bytes.

    Args:
        image: Any PIL image (RGBA, RGB, L, …).

    Returns:
        Raw PNG file contents as ``bytes``.
    """
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def error_lines(exc: BaseException) -> list[str]:
    """Split an exception message into the lines drawn on the image."""
    lines = str(exc).splitlines()
    return lines or [type(exc).__name__]


def render_error_image(exc: BaseException, settings: Settings | None = None) -> bytes:
    """Draw the exception message on a black PNG.

    The title carries the numeric error code of ``ThumbnailError``
    subclasses; each message line is drawn below it.

    Args:
        exc: The failure to render.
        settings: Application settings (provides the image width).

    Returns:
        PNG bytes of size ``error_image_width × (20 + 14 * lines)``.
    """
    settings = settings if settings is not None else Settings()
    lines = error_lines(exc)
    height = 20 + len(lines) * 14

    font = ImageFont.load_default()
    code = getattr(exc, "code", 0)
    image = Image.new("RGB", (settings.error_image_width, height), (0, 0, 0))
    with closing(image):
        draw = ImageDraw.Draw(image)
        draw.text((_MARGIN, _MARGIN), f"Thumbnail error {code}", fill=_TITLE_COLOR, font=font)
        y = _MARGIN + _TITLE_HEIGHT
        for line in lines:
            draw.text((_MARGIN, y), line, fill=_TEXT_COLOR, font=font)
            y += _LINE_HEIGHT
        return image_to_png_bytes(image)
