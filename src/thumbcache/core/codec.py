"""Pillow implementation of the image codec capability.

The orchestrator only talks to the ``Codec`` protocol, so the codec can be
swapped or wrapped (tests wrap ``PillowCodec`` in a mock to count calls).

Pixel buffers are plain ``PIL.Image.Image`` objects. Every method that
returns a buffer hands ownership to the caller, who must close it; the
filter methods return a *new* buffer and leave their input untouched.
"""

from __future__ import annotations

import io
import logging
from contextlib import closing
from pathlib import Path
from typing import Protocol, runtime_checkable

import numpy as np
from PIL import Image

from thumbcache.core import formats
from thumbcache.errors import (
    CanvasAllocationError,
    EncodeError,
    InvalidSourceImageError,
    UnsupportedSourceFormatError,
)
from thumbcache.schemas import Rect, SourceImage

logger = logging.getLogger(__name__)

_CANVAS_COLOR = (0, 0, 0)


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class Codec(Protocol):
    """Interface the thumbnail orchestrator needs from an image codec."""

    def probe(self, path: Path) -> SourceImage: ...

    def decode(self, image: SourceImage) -> Image.Image: ...

    def new_canvas(self, width: int, height: int) -> Image.Image: ...

    def resample(
        self,
        dst: Image.Image,
        src: Image.Image,
        dest_rect: Rect,
        source_rect: Rect,
    ) -> None: ...

    def composite(
        self, dst: Image.Image, overlay: Image.Image, at: tuple[float, float]
    ) -> None: ...

    def apply_brightness(self, image: Image.Image, amount: float) -> Image.Image: ...

    def apply_contrast(self, image: Image.Image, amount: float) -> Image.Image: ...

    def encode_jpeg(self, image: Image.Image, quality: int) -> bytes: ...


# ---------------------------------------------------------------------------
# Pillow codec
# ---------------------------------------------------------------------------


class PillowCodec:
    """Codec backed by Pillow and numpy.

    Filter amounts use the classic GD scale: brightness is an offset in
    ``[-255, 255]`` added to every channel, contrast is in ``[-255, 255]``
    where negative values increase contrast.
    """

    def probe(self, path: Path) -> SourceImage:
        """Read the image header without decoding pixel data.

        Args:
            path: Filesystem path of the image.

        Returns:
            The probed ``SourceImage``.

        Raises:
            InvalidSourceImageError: If the file is not a raster image.
            UnsupportedSourceFormatError: If the format is not registered.
        """
        try:
            with closing(Image.open(path)) as image:
                pil_format = image.format
                width, height = image.size
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise InvalidSourceImageError(
                f"{path} is not a valid image file: {exc}"
            ) from exc

        card = formats.card_for_pil_format(pil_format)
        if card is None:
            raise UnsupportedSourceFormatError(
                f"{path} is a {pil_format} image, not a JPEG, GIF or PNG."
            )

        return SourceImage(path=path, width=width, height=height, format=card.format)

    def decode(self, image: SourceImage) -> Image.Image:
        """Decode a probed image through its format's decoder."""
        return formats.decode(image.path, image.format)

    def new_canvas(self, width: int, height: int) -> Image.Image:
        """Allocate a black RGB canvas.

        Raises:
            CanvasAllocationError: If the size is empty or allocation fails.
        """
        if width < 1 or height < 1:
            raise CanvasAllocationError(
                f"Can't create a {width}x{height} destination image."
            )
        try:
            return Image.new("RGB", (width, height), _CANVAS_COLOR)
        except (MemoryError, ValueError, Image.DecompressionBombError) as exc:
            raise CanvasAllocationError(
                f"Can't create a {width}x{height} destination image: {exc}"
            ) from exc

    def resample(
        self,
        dst: Image.Image,
        src: Image.Image,
        dest_rect: Rect,
        source_rect: Rect,
    ) -> None:
        """Scale *source_rect* of *src* into *dest_rect* of *dst*, in place.

        The source box keeps its fractional coordinates. A box reaching
        outside the source is padded with black instead of failing.
        """
        width, height = int(dest_rect.w), int(dest_rect.h)
        if width < 1 or height < 1 or source_rect.w <= 0 or source_rect.h <= 0:
            logger.debug("Empty resample %s -> %s skipped.", source_rect, dest_rect)
            return

        box = (
            source_rect.x,
            source_rect.y,
            source_rect.x + source_rect.w,
            source_rect.y + source_rect.h,
        )
        src_w, src_h = src.size
        if box[0] >= 0 and box[1] >= 0 and box[2] <= src_w and box[3] <= src_h:
            resized = src.resize((width, height), Image.Resampling.BICUBIC, box=box)
        else:
            logger.debug("Source box %s exceeds %s, padding.", box, src.size)
            with closing(src.crop(box)) as region:
                resized = region.resize((width, height), Image.Resampling.BICUBIC)

        with closing(resized):
            position = (int(dest_rect.x), int(dest_rect.y))
            if resized.mode == "RGBA":
                dst.paste(resized, position, resized)
            else:
                dst.paste(resized, position)

    def composite(
        self, dst: Image.Image, overlay: Image.Image, at: tuple[float, float]
    ) -> None:
        """Draw *overlay* at native size onto *dst*, clipping silently."""
        position = (int(at[0]), int(at[1]))
        if overlay.mode == "RGBA":
            dst.paste(overlay, position, overlay)
        else:
            dst.paste(overlay, position)

    def apply_brightness(self, image: Image.Image, amount: float) -> Image.Image:
        """Add *amount* to every colour channel, clamped to ``[0, 255]``."""
        arr = np.asarray(image, dtype=np.float32)
        arr = arr + int(amount)
        return Image.fromarray(np.clip(arr, 0, 255).astype(np.uint8))

    def apply_contrast(self, image: Image.Image, amount: float) -> Image.Image:
        """Scale every channel around mid-grey.

        The factor is ``((100 - amount) / 100) ** 2``: ``0`` is neutral,
        negative amounts stretch, amounts between 0 and 200 flatten.
        """
        factor = ((100.0 - int(amount)) / 100.0) ** 2
        arr = np.asarray(image, dtype=np.float32) / 255.0
        arr = ((arr - 0.5) * factor + 0.5) * 255.0
        return Image.fromarray(np.clip(arr, 0, 255).astype(np.uint8))

    def encode_jpeg(self, image: Image.Image, quality: int) -> bytes:
        """Serialize *image* as baseline JPEG bytes.

        Raises:
            EncodeError: If Pillow fails to encode the image.
        """
        buffer = io.BytesIO()
        try:
            image.save(buffer, format="JPEG", quality=quality)
        except (OSError, ValueError) as exc:
            raise EncodeError(f"JPEG encoding failed: {exc}") from exc
        return buffer.getvalue()
