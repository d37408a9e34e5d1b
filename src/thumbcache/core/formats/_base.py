"""Base types and shared utilities for format decoders.

This module defines the ``FormatCard`` schema (what a format *is*), the
``ImageDecoder`` protocol (what a decoder *does*), and the low-level
Pillow helper reused by every format module.
"""

from __future__ import annotations

import logging
from contextlib import closing
from pathlib import Path
from typing import Protocol, runtime_checkable

from PIL import Image
from pydantic import BaseModel

from thumbcache.errors import DecodeError
from thumbcache.schemas import ImageFormat

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------


class FormatCard(BaseModel):
    """Metadata describing one supported raster format.

    Attributes:
        format: The format tag used throughout the pipeline.
        pil_formats: Format names ``PIL.Image.format`` reports for files of
            this format.
        mime: MIME type of the format.
        overlay_capable: Whether the format may be used as an overlay
            (formats carrying transparency only).
    """

    model_config = {"frozen": True}

    format: ImageFormat
    pil_formats: tuple[str, ...]
    mime: str
    overlay_capable: bool = False


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class ImageDecoder(Protocol):
    """Callable that materialises the pixel data of an image file."""

    def __call__(self, path: Path) -> Image.Image:
        """Decode *path* into a fully loaded PIL image.

        Raises:
            DecodeError: If the pixel data cannot be read.
        """
        ...


# ---------------------------------------------------------------------------
# Shared Pillow helpers
# ---------------------------------------------------------------------------


def open_image(path: Path, mode: str, label: str = "image") -> Image.Image:
    """Open, fully load and convert an image file.

    ``Image.open`` is lazy, so the pixel data is loaded here to surface
    truncated or corrupt streams as a ``DecodeError`` instead of failing
    later inside the resampler.

    Args:
        path: Filesystem path of the image.
        mode: Target PIL mode (``RGB``, ``RGBA``…).
        label: Human-readable format name for error messages.

    Returns:
        A loaded PIL image in *mode*. The caller owns it and must close it.

    Raises:
        DecodeError: On any decoding failure.
    """
    try:
        with closing(Image.open(path)) as raw:
            raw.load()
            image = raw.convert(mode)
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"Can't decode {label} data from {path}: {exc}") from exc

    logger.debug("Decoded %s %s as %s %s", label, path, image.mode, image.size)
    return image
