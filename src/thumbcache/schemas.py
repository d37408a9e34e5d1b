"""Pydantic data contracts shared across modules.

Every cross-module boundary is typed through one of these schemas.
The pipeline flow is::

    path + TransformConfig
        → probe()              → SourceImage
        → calculate_geometry() → ResolvedGeometry
        → place_overlay()      → overlay (x, y)
        → encode_jpeg()        → bytes
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ImageFormat(str, Enum):
    """Raster formats accepted as source images."""

    JPEG = "jpeg"
    PNG = "png"
    GIF = "gif"


class HorizontalAlign(str, Enum):
    """Horizontal overlay alignment."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class VerticalAlign(str, Enum):
    """Vertical overlay alignment."""

    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


class Rect(BaseModel):
    """An axis-aligned rectangle.

    Coordinates stay fractional throughout the geometry layer; only the
    codec truncates them when touching pixels.
    """

    model_config = {"frozen": True}

    x: float = 0.0
    y: float = 0.0
    w: float
    h: float


class ResolvedGeometry(BaseModel):
    """Sampling rectangles derived from a config and source dimensions.

    Attributes:
        source_rect: Region of the source image to sample.
        dest_rect: Region of the output canvas to paint.
        resolved_width: Requested width after keep-ratio resolution
            (``0`` once keep-ratio has fitted the box).
        resolved_height: Requested height after keep-ratio resolution.
    """

    model_config = {"frozen": True}

    source_rect: Rect
    dest_rect: Rect
    resolved_width: float
    resolved_height: float

    @property
    def canvas_size(self) -> tuple[int, int]:
        """Output canvas ``(width, height)``, truncated to whole pixels."""
        width = self.resolved_width or self.dest_rect.w
        height = self.resolved_height or self.dest_rect.h
        return int(width), int(height)


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------


class SourceImage(BaseModel):
    """Header information of a probed image file.

    Attributes:
        path: Filesystem path of the image.
        width: Native pixel width.
        height: Native pixel height.
        format: Detected raster format.
    """

    model_config = {"frozen": True}

    path: Path
    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)
    format: ImageFormat


# ---------------------------------------------------------------------------
# Transform configuration
# ---------------------------------------------------------------------------


class TransformConfig(BaseModel):
    """Finalized, immutable description of a single thumbnail transform.

    A width or height of ``0`` leaves that axis unconstrained. The four
    ``src_*`` fields form a manual crop only when all of them are set.

    Attributes:
        width: Requested output width.
        height: Requested output height.
        crop: Crop the source to the destination aspect ratio.
        keep_ratio: Fit inside ``width × height`` preserving aspect ratio.
        quality: JPEG encoding quality.
        src_x: Manual crop left edge.
        src_y: Manual crop top edge.
        src_w: Manual crop width.
        src_h: Manual crop height.
        overlay: Optional PNG/GIF drawn on top of the thumbnail.
        overlay_x: Explicit overlay left offset (``0`` counts as unset).
        overlay_y: Explicit overlay top offset (``0`` counts as unset).
        overlay_align: Horizontal overlay alignment.
        overlay_valign: Vertical overlay alignment.
        brightness: Brightness shift in ``[-1, 1]``.
        contrast: Contrast change in ``[-1, 1]``.
        time: Opaque token; only changes the cache key.
        cache_dir: Root of the thumbnail cache.
        no_cache: Disable cache lookup and write-through.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    crop: bool = False
    keep_ratio: bool = False
    quality: int = Field(default=100, ge=0, le=100)

    src_x: int | None = None
    src_y: int | None = None
    src_w: int | None = None
    src_h: int | None = None

    overlay: Path | None = None
    overlay_x: int | None = None
    overlay_y: int | None = None
    overlay_align: HorizontalAlign | None = None
    overlay_valign: VerticalAlign | None = None

    brightness: float | None = Field(default=None, ge=-1.0, le=1.0)
    contrast: float | None = Field(default=None, ge=-1.0, le=1.0)

    time: int = 0

    cache_dir: Path | None = None
    no_cache: bool = True

    @property
    def manual_crop(self) -> Rect | None:
        """Return the manual crop rectangle, or ``None`` if any part is unset."""
        parts = (self.src_x, self.src_y, self.src_w, self.src_h)
        if any(part is None for part in parts):
            return None
        return Rect(x=self.src_x, y=self.src_y, w=self.src_w, h=self.src_h)

    def has_dimensions(self) -> bool:
        """Return ``True`` if at least one of width/height is constrained."""
        return bool(self.width or self.height)
