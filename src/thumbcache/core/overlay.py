"""Overlay placement from explicit offsets or alignment directives."""

from __future__ import annotations

from thumbcache.schemas import (
    HorizontalAlign,
    Rect,
    TransformConfig,
    VerticalAlign,
)


# Fraction of the free space (canvas extent minus overlay extent) placed
# before the overlay.
_H_FACTORS = {
    HorizontalAlign.LEFT: 0.0,
    HorizontalAlign.CENTER: 0.5,
    HorizontalAlign.RIGHT: 1.0,
}
_V_FACTORS = {
    VerticalAlign.TOP: 0.0,
    VerticalAlign.CENTER: 0.5,
    VerticalAlign.BOTTOM: 1.0,
}


def place_overlay(
    config: TransformConfig,
    overlay_width: int,
    overlay_height: int,
    dest_rect: Rect,
) -> tuple[float, float]:
    """Return the top-left position of the overlay on the canvas.

    An explicit, non-zero ``overlay_x``/``overlay_y`` wins over alignment.
    The result is not clamped: the overlay may hang partly or entirely
    outside the canvas, the compositor clips it.

    Args:
        config: Transform configuration with the overlay options.
        overlay_width: Native overlay width (overlays are never scaled).
        overlay_height: Native overlay height.
        dest_rect: The destination rectangle computed by the geometry step.

    Returns:
        ``(x, y)`` in canvas coordinates, possibly fractional.
    """
    x: float = 0
    y: float = 0

    if config.overlay_x:
        x = config.overlay_x
    elif config.overlay_align is not None:
        x = (dest_rect.w - overlay_width) * _H_FACTORS[config.overlay_align]

    if config.overlay_y:
        y = config.overlay_y
    elif config.overlay_valign is not None:
        y = (dest_rect.h - overlay_height) * _V_FACTORS[config.overlay_valign]

    return x, y
