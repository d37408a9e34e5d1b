"""Reusable Streamlit UI components.

Each function renders a self-contained section of the interface.
Business logic stays in ``core``: widgets only collect raw request options
and display bytes.
"""

from __future__ import annotations

import hashlib
import tempfile
from pathlib import Path
from typing import Any

import streamlit as st

from thumbcache.config import Settings
from thumbcache.schemas import HorizontalAlign, VerticalAlign
from thumbcache.ui.state import CONTROL_DEFAULTS

_UPLOAD_DIR = Path(tempfile.gettempdir()) / "thumbcache-uploads"


# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------


def _store_upload(data: bytes, suffix: str) -> Path:
    """Persist uploaded bytes under a content-derived name.

    Identical uploads land on the same path, so the thumbnail cache key
    (which includes the source path) stays stable across reruns.
    """
    _UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    digest = hashlib.md5(data).hexdigest()  # noqa: S324
    path = _UPLOAD_DIR / f"{digest}{suffix}"
    if not path.is_file():
        path.write_bytes(data)
    return path


def render_uploader(settings: Settings, label: str = "Upload a source image") -> Path | None:
    """Render an image upload widget.

    Args:
        settings: Application settings (allowed formats, max size).
        label: Widget label.

    Returns:
        Path of the stored upload, or ``None`` if nothing was uploaded.
    """
    uploaded = st.file_uploader(
        label,
        type=settings.upload_formats,
        help=f"Max {settings.max_upload_mb:.0f} MB — JPG, PNG or GIF.",
    )
    if uploaded is None:
        return None
    if uploaded.size > settings.max_upload_mb * 1024 * 1024:
        st.error(f"File is larger than {settings.max_upload_mb:.0f} MB.")
        return None
    return _store_upload(uploaded.getvalue(), Path(uploaded.name).suffix.lower())


# ---------------------------------------------------------------------------
# Sidebar controls
# ---------------------------------------------------------------------------


def render_sidebar_controls(settings: Settings) -> dict[str, Any]:
    """Render the transform controls in the sidebar.

    Args:
        settings: Application settings (default quality).

    Returns:
        Raw request options, in the same shape as query parameters.
    """
    st.sidebar.header("Transform")

    options: dict[str, Any] = {}
    options["config"] = st.sidebar.text_input(
        "Preset section",
        help="Section of the INI config file merged before these options.",
    )

    options["width"] = st.sidebar.number_input(
        "Width", min_value=0, value=CONTROL_DEFAULTS.width, step=10,
        help="0 = computed from the aspect ratio.",
    )
    options["height"] = st.sidebar.number_input(
        "Height", min_value=0, value=CONTROL_DEFAULTS.height, step=10,
        help="0 = computed from the aspect ratio.",
    )

    mode = st.sidebar.radio("Mode", ["Stretch", "Crop", "Keep ratio"], horizontal=True)
    options["crop"] = mode == "Crop"
    options["keep_ratio"] = mode == "Keep ratio"

    options["quality"] = st.sidebar.slider(
        "JPEG quality", min_value=0, max_value=100,
        value=settings.default_quality,
    )

    st.sidebar.header("Filters")
    brightness = st.sidebar.slider(
        "Brightness", min_value=-1.0, max_value=1.0,
        value=CONTROL_DEFAULTS.brightness, step=0.05, help="0 = no change.",
    )
    contrast = st.sidebar.slider(
        "Contrast", min_value=-1.0, max_value=1.0,
        value=CONTROL_DEFAULTS.contrast, step=0.05, help="0 = no change.",
    )
    # Unset filters skip the filter pass entirely.
    options["brightness"] = brightness or None
    options["contrast"] = contrast or None

    return options


def render_overlay_controls(settings: Settings) -> dict[str, Any]:
    """Render the optional overlay upload and alignment controls.

    Returns:
        Raw overlay request options (empty when no overlay is uploaded).
    """
    with st.sidebar.expander("Overlay"):
        uploaded = st.file_uploader("Overlay (PNG or GIF)", type=["png", "gif"])
        align = st.selectbox("Horizontal", [a.value for a in HorizontalAlign], index=2)
        valign = st.selectbox("Vertical", [a.value for a in VerticalAlign], index=2)
    if uploaded is None:
        return {}
    path = _store_upload(uploaded.getvalue(), Path(uploaded.name).suffix.lower())
    return {"overlay": str(path), "overlay_align": align, "overlay_valign": valign}


# ---------------------------------------------------------------------------
# Sidebar original preview
# ---------------------------------------------------------------------------


def render_sidebar_preview(source_path: Path) -> None:
    """Display a small preview of the source image in the sidebar."""
    st.sidebar.divider()
    st.sidebar.image(str(source_path), caption="Original", use_container_width=True)


# ---------------------------------------------------------------------------
# Main result area
# ---------------------------------------------------------------------------


def render_thumbnail(data: bytes, cached: bool) -> None:
    """Display the thumbnail at its native size with a download button.

    Args:
        data: Encoded JPEG bytes.
        cached: Whether the bytes came from the cache.
    """
    _, center, _ = st.columns([1, 3, 1])
    with center:
        st.image(data, caption="Thumbnail (cached)" if cached else "Thumbnail")
        st.download_button(
            label="⬇ Download JPEG",
            data=data,
            file_name="thumbnail.jpg",
            mime="image/jpeg",
            use_container_width=True,
        )


def render_error(png: bytes) -> None:
    """Display a rendered error image."""
    _, center, _ = st.columns([1, 3, 1])
    with center:
        st.image(png, caption="Error")
