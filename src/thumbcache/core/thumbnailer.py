"""Thumbnail orchestration with a cache short-circuit.

Typical usage::

    from thumbcache.core.thumbnailer import Thumbnailer
    from thumbcache.schemas import TransformConfig

    config = TransformConfig(width=120, crop=False, no_cache=False)
    data = Thumbnailer().produce("photos/cat.png", config)

Pipeline for a cache miss: geometry → decode → canvas → resample →
overlay → brightness → contrast → encode → cache write. Every decoded
buffer is owned by an ``ExitStack`` and closed on every exit path.
"""

from __future__ import annotations

import logging
import tempfile
import threading
from contextlib import ExitStack, closing
from pathlib import Path

from PIL import Image

from thumbcache.core.cache import CacheStore, derive_cache_key
from thumbcache.core.codec import Codec, PillowCodec
from thumbcache.core.formats import get_card
from thumbcache.core.geometry import calculate_geometry
from thumbcache.core.overlay import place_overlay
from thumbcache.errors import (
    CacheMissError,
    DecodeError,
    GenerationCancelledError,
    InvalidOverlayImageError,
    InvalidSourceImageError,
    MissingDimensionsError,
    MissingSourceError,
    OverlayDecodeError,
    OverlayNotFoundError,
    SourceNotFoundError,
    UnsupportedOverlayFormatError,
    UnsupportedSourceFormatError,
)
from thumbcache.schemas import Rect, SourceImage, TransformConfig

logger = logging.getLogger(__name__)

# Config filter values are in [-1, 1]; the codec takes whole GD-scale steps.
_FILTER_SCALE = 255


class Thumbnailer:
    """Produces thumbnail bytes for a source image and a transform config.

    Holds no per-request state, so one instance can serve many requests.

    Args:
        codec: Image codec to use. Defaults to ``PillowCodec``.
    """

    def __init__(self, codec: Codec | None = None) -> None:
        self._codec: Codec = codec if codec is not None else PillowCodec()

    def produce(
        self,
        source_path: str | Path | None,
        config: TransformConfig,
        cancel_event: threading.Event | None = None,
    ) -> bytes:
        """Return the JPEG thumbnail for *source_path*, using the cache.

        With caching enabled, a stored entry is returned verbatim; entries
        never expire. Otherwise the thumbnail is generated and, when
        caching is enabled, written through to the cache.

        Args:
            source_path: Path of the source image.
            config: The user-supplied transform configuration.
            cancel_event: Optional event; when set, generation stops at the
                next phase boundary and nothing is written to the cache.

        Returns:
            Encoded JPEG bytes.

        Raises:
            ThumbnailError: A subclass describing the first failure.
        """
        source = self._validate(source_path, config)

        store = self.cache_store_for(config)
        if store is not None:
            key = derive_cache_key(source_path, config)
            try:
                data = store.read(key)
            except CacheMissError:
                logger.debug("Cache miss for %s (%s)", source.path, key)
            else:
                logger.debug("Cache hit for %s (%s)", source.path, key)
                return data

        data = self._generate(source, config, cancel_event)

        if store is not None:
            _raise_if_cancelled(cancel_event, "cache write")
            store.write(key, data)

        return data

    @staticmethod
    def cache_store_for(config: TransformConfig) -> CacheStore | None:
        """Return the cache store *config* writes to, or ``None`` if disabled.

        Without an explicit ``cache_dir`` the system temporary directory
        is the cache root.
        """
        if config.no_cache:
            return None
        root = config.cache_dir or Path(tempfile.gettempdir())
        return CacheStore(root)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate(
        self, source_path: str | Path | None, config: TransformConfig
    ) -> SourceImage:
        if not source_path:
            raise MissingSourceError("Please specify the source image path.")
        path = Path(source_path)
        if not path.is_file():
            raise SourceNotFoundError(f"Source file not found: {path}")
        if not config.has_dimensions():
            raise MissingDimensionsError(
                "Please specify the width or the height parameter."
            )
        return self._codec.probe(path)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def _generate(
        self,
        source: SourceImage,
        config: TransformConfig,
        cancel_event: threading.Event | None,
    ) -> bytes:
        geometry = calculate_geometry(config, source.width, source.height)

        with ExitStack() as stack:
            src_image = stack.enter_context(closing(self._codec.decode(source)))
            _raise_if_cancelled(cancel_event, "decode")

            canvas = stack.enter_context(
                closing(self._codec.new_canvas(*geometry.canvas_size))
            )
            self._codec.resample(
                canvas, src_image, geometry.dest_rect, geometry.source_rect
            )
            _raise_if_cancelled(cancel_event, "resample")

            if config.overlay is not None:
                self._draw_overlay(canvas, config, geometry.dest_rect)
                _raise_if_cancelled(cancel_event, "overlay")

            if config.brightness is not None:
                canvas = stack.enter_context(
                    closing(
                        self._codec.apply_brightness(
                            canvas, int(config.brightness * _FILTER_SCALE)
                        )
                    )
                )
            if config.contrast is not None:
                canvas = stack.enter_context(
                    closing(
                        self._codec.apply_contrast(
                            canvas, int(-config.contrast * _FILTER_SCALE)
                        )
                    )
                )

            data = self._codec.encode_jpeg(canvas, config.quality)

        logger.info(
            "Generated %dx%d thumbnail for %s (%d bytes)",
            *geometry.canvas_size,
            source.path,
            len(data),
        )
        return data

    def _draw_overlay(
        self, canvas: Image.Image, config: TransformConfig, dest_rect: Rect
    ) -> None:
        """Decode the configured overlay and composite it onto *canvas*."""
        path = Path(config.overlay)
        if not path.is_file():
            raise OverlayNotFoundError(f"Overlay file not found: {path}")

        try:
            info = self._codec.probe(path)
        except UnsupportedSourceFormatError as exc:
            raise UnsupportedOverlayFormatError(
                f"Overlay image type is not PNG or GIF: {path}"
            ) from exc
        except InvalidSourceImageError as exc:
            raise InvalidOverlayImageError(
                f"Overlay file is not a valid image file: {path}"
            ) from exc

        if not get_card(info.format).overlay_capable:
            raise UnsupportedOverlayFormatError(
                f"Overlay image type is not PNG or GIF: {path}"
            )

        try:
            overlay = self._codec.decode(info)
        except DecodeError as exc:
            raise OverlayDecodeError(
                f"Can't decode the overlay image {path}: {exc}"
            ) from exc

        with closing(overlay):
            at = place_overlay(config, info.width, info.height, dest_rect)
            self._codec.composite(canvas, overlay, at)


def _raise_if_cancelled(cancel_event: threading.Event | None, phase: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise GenerationCancelledError(f"Thumbnail generation cancelled after {phase}.")
