"""Custom exceptions for the thumbcache pipeline.

Every failure surfaces as a single ``ThumbnailError`` subclass. The numeric
``code`` is stable and is shown on the rendered error image.
"""


class ThumbnailError(Exception):
    """Base exception for all thumbcache errors."""

    code: int = 0


class MissingSourceError(ThumbnailError):
    """Raised when no source path is supplied."""

    code = 1


class SourceNotFoundError(ThumbnailError):
    """Raised when the source path does not point to an existing file."""

    code = 2


class InvalidSourceImageError(ThumbnailError):
    """Raised when the source file cannot be probed as a raster image."""

    code = 3


class UnsupportedSourceFormatError(InvalidSourceImageError):
    """Raised when the source probes to a format other than JPEG, PNG or GIF."""

    code = 4


class MissingDimensionsError(ThumbnailError):
    """Raised when neither width nor height is configured."""

    code = 5


class DecodeError(ThumbnailError):
    """Raised when pixel data cannot be materialised from a probed image.

    Typical causes: truncated file, corrupted compressed stream.
    """

    code = 6


class CanvasAllocationError(ThumbnailError):
    """Raised when the destination canvas cannot be created.

    Typical causes: zero-sized canvas, memory exhaustion.
    """

    code = 7


class OverlayNotFoundError(ThumbnailError):
    """Raised when the configured overlay file does not exist."""

    code = 8


class InvalidOverlayImageError(ThumbnailError):
    """Raised when the overlay file cannot be probed as a raster image."""

    code = 9


class UnsupportedOverlayFormatError(ThumbnailError):
    """Raised when the overlay is not a PNG or GIF."""

    code = 10


class OverlayDecodeError(ThumbnailError):
    """Raised when the overlay pixel data cannot be decoded."""

    code = 11


class CacheWriteError(ThumbnailError):
    """Raised when a cache directory or file cannot be written."""

    code = 12


class GenerationCancelledError(ThumbnailError):
    """Raised when generation is cancelled between pipeline phases."""

    code = 13


class CacheMissError(ThumbnailError):
    """Raised when reading a cache entry that does not exist."""

    code = 14


class InvalidConfigError(ThumbnailError):
    """Raised when merged configuration options fail validation."""

    code = 15


class EncodeError(ThumbnailError):
    """Raised when the thumbnail cannot be encoded as JPEG."""

    code = 16


class CacheReadError(ThumbnailError):
    """Raised when a cache entry exists but cannot be read.

    Typical causes: a directory at the entry path, missing permissions.
    """

    code = 17
