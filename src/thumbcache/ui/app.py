"""thumbcache — Streamlit preview application entry point.

Launch with::

    streamlit run src/thumbcache/ui/app.py
"""

from __future__ import annotations

import logging

import streamlit as st

from thumbcache.config import Settings
from thumbcache.core.cache import derive_cache_key
from thumbcache.core.resolver import resolve_config
from thumbcache.core.thumbnailer import Thumbnailer
from thumbcache.errors import ThumbnailError
from thumbcache.ui.error_image import render_error_image
from thumbcache.ui.state import (
    StateKey,
    clear_result_state,
    get_state,
    set_state,
)
from thumbcache.ui.widgets import (
    render_error,
    render_overlay_controls,
    render_sidebar_controls,
    render_sidebar_preview,
    render_thumbnail,
    render_uploader,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Page configuration (must be called first)
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="thumbcache",
    page_icon="🖼️",
    layout="wide",
    initial_sidebar_state="expanded",
)


# ---------------------------------------------------------------------------
# Cached resources
# ---------------------------------------------------------------------------


@st.cache_resource
def _get_thumbnailer() -> Thumbnailer:
    """Create the shared, stateless thumbnailer."""
    return Thumbnailer()


@st.cache_data(show_spinner=False)
def _get_settings() -> Settings:
    """Load and cache application settings."""
    return Settings()


# ---------------------------------------------------------------------------
# Main application
# ---------------------------------------------------------------------------


def main() -> None:
    """Run the thumbcache Streamlit application."""
    settings = _get_settings()

    # ---- Header ----
    st.title("🖼️ thumbcache")
    st.caption("Cached thumbnails: resize, crop, overlay and tone in one pass.")

    # ---- Sidebar: transform controls ----
    options = render_sidebar_controls(settings)
    options.update(render_overlay_controls(settings))

    # ---- Upload ----
    source_path = render_uploader(settings)
    if source_path is None:
        st.info("Upload a JPG, PNG or GIF image to get started.", icon="📷")
        clear_result_state()
        return

    render_sidebar_preview(source_path)

    # ---- Thumbnail ----
    clear_result_state()
    cached = False
    try:
        config = resolve_config(options, settings)
        store = Thumbnailer.cache_store_for(config)
        cached = store is not None and store.exists(derive_cache_key(source_path, config))
        with st.spinner("Generating thumbnail…"):
            data = _get_thumbnailer().produce(source_path, config)
        set_state(StateKey.THUMBNAIL, data)
    except ThumbnailError as exc:
        logger.warning("Thumbnail failed for %s: %s", source_path, exc)
        set_state(StateKey.ERROR_IMAGE, render_error_image(exc, settings))

    # ---- Display ----
    st.divider()
    error_png = get_state(StateKey.ERROR_IMAGE)
    if error_png is not None:
        render_error(error_png)
    else:
        render_thumbnail(get_state(StateKey.THUMBNAIL), cached)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
