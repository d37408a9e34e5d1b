"""Format registry — maps format tags to decoders.

Adding a new format requires two steps:

1. Create a module in this package (e.g. ``webp.py``) that exports a
   ``FORMAT_CARD`` (``FormatCard``) and a ``decode`` function with
   signature ``(path: Path) -> PIL.Image.Image``.
2. Register it below with ``_register_format_module``.

Formats are resolved once, when the image is probed; decoding then
dispatches on the ``ImageFormat`` tag.

Typical usage::

    from thumbcache.core.formats import card_for_pil_format, decode

    card = card_for_pil_format("PNG")
    image = decode(path, card.format)
"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image

from thumbcache.core.formats import gif, jpeg, png
from thumbcache.core.formats._base import FormatCard, ImageDecoder
from thumbcache.schemas import ImageFormat

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

# Maps format tag → (FormatCard, decode function).
_REGISTRY: dict[ImageFormat, tuple[FormatCard, ImageDecoder]] = {}


def _register_format_module(card: FormatCard, decoder: ImageDecoder) -> None:
    """Register a format module's card and decoder.

    Args:
        card: The ``FORMAT_CARD`` exported by the module.
        decoder: The ``decode`` function exported by the module.
    """
    if card.format in _REGISTRY:
        logger.warning("Duplicate format '%s' — skipping.", card.format.value)
        return
    _REGISTRY[card.format] = (card, decoder)


# Register built-in formats.
_register_format_module(jpeg.FORMAT_CARD, jpeg.decode)
_register_format_module(png.FORMAT_CARD, png.decode)
_register_format_module(gif.FORMAT_CARD, gif.decode)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_all_cards() -> list[FormatCard]:
    """Return every registered format card."""
    return [card for card, _ in _REGISTRY.values()]


def get_card(image_format: ImageFormat) -> FormatCard:
    """Return the card of a registered format.

    Raises:
        ValueError: If the format is not registered.
    """
    if image_format not in _REGISTRY:
        raise ValueError(
            f"Unknown format '{image_format}'. "
            f"Registered: {sorted(f.value for f in _REGISTRY)}"
        )
    return _REGISTRY[image_format][0]


def card_for_pil_format(pil_format: str | None) -> FormatCard | None:
    """Return the card matching a Pillow format name, or ``None``."""
    for card, _ in _REGISTRY.values():
        if pil_format in card.pil_formats:
            return card
    return None


def decode(path: Path, image_format: ImageFormat) -> Image.Image:
    """Decode *path* with the decoder registered for *image_format*.

    Raises:
        ValueError: If the format is not registered.
        DecodeError: If the pixel data cannot be read.
    """
    get_card(image_format)
    _, decoder = _REGISTRY[image_format]
    return decoder(path)


# Re-export key types for convenience.
__all__ = [
    "FormatCard",
    "ImageDecoder",
    "card_for_pil_format",
    "decode",
    "get_all_cards",
    "get_card",
]
