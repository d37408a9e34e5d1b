"""Source and destination rectangle calculation.

Pure arithmetic, no I/O. Rectangles are returned with fractional
coordinates; truncation to whole pixels is left to the codec.

Typical usage::

    from thumbcache.core.geometry import calculate_geometry
    from thumbcache.schemas import TransformConfig

    config = TransformConfig(width=100, height=100, crop=True)
    geometry = calculate_geometry(config, 400, 200)
    geometry.source_rect  # Rect(x=100.0, y=0.0, w=200.0, h=200.0)
"""

from __future__ import annotations

from thumbcache.schemas import Rect, ResolvedGeometry, TransformConfig


def calculate_geometry(
    config: TransformConfig,
    src_width: int,
    src_height: int,
) -> ResolvedGeometry:
    """Derive the sampling rectangles for a transform.

    Modes, in priority order when both width and height are set: crop,
    keep-ratio, stretch. With a single constrained axis the other one is
    computed from the source aspect ratio.

    Args:
        config: The transform configuration.
        src_width: Native width of the source image.
        src_height: Native height of the source image.

    Returns:
        The resolved source/destination rectangles. The config itself is
        never modified; keep-ratio resolution is reported through
        ``resolved_width``/``resolved_height``.
    """
    manual_crop = config.manual_crop
    if manual_crop is not None:
        src = manual_crop
    else:
        src = Rect(x=0, y=0, w=src_width, h=src_height)

    src_x, src_y, src_w, src_h = src.x, src.y, src.w, src.h
    dst_w: float = config.width
    dst_h: float = config.height
    resolved_width: float = config.width
    resolved_height: float = config.height

    if dst_w and dst_h:
        if config.crop:
            if manual_crop is None:
                if src_w / dst_w > src_h / dst_h:
                    old_w = src_w
                    src_w = (dst_w / dst_h) * src_h
                    src_x = (old_w - src_w) / 2
                else:
                    old_h = src_h
                    src_h = (dst_h / dst_w) * src_w
                    src_y = (old_h - src_h) / 2
        elif config.keep_ratio:
            if src_w > src_h:
                dst_w = config.width
                dst_h = (src_h / src_w) * dst_w
            else:
                dst_h = config.height
                dst_w = (src_w / src_h) * dst_h
            resolved_width = 0
            resolved_height = 0
    elif dst_w:
        dst_h = (src_h / src_w) * dst_w
    else:
        dst_w = (src_w / src_h) * dst_h

    return ResolvedGeometry(
        source_rect=Rect(x=src_x, y=src_y, w=src_w, h=src_h),
        dest_rect=Rect(x=0, y=0, w=dst_w, h=dst_h),
        resolved_width=resolved_width,
        resolved_height=resolved_height,
    )
