"""Content-addressable, sharded thumbnail cache.

A cache key is the MD5 fingerprint of the source path and the transform
config. Entries live two shard levels deep so no directory holds more
than 256 sub-directories::

    <root>/ab/cd/abcd…ef.jpg

Entries are immutable: they are never invalidated except by deleting the
files. Writes go through a temporary file in the shard directory followed
by ``os.replace`` so readers never observe a partially written entry.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path

from thumbcache.errors import CacheMissError, CacheReadError, CacheWriteError
from thumbcache.schemas import TransformConfig

logger = logging.getLogger(__name__)

CACHE_EXTENSION = ".jpg"

# Options that choose *where* the entry lives, not *what* it contains.
_KEY_EXCLUDED_FIELDS = {"cache_dir", "no_cache"}

_DIR_MODE = 0o777
_FILE_MODE = 0o644


# ---------------------------------------------------------------------------
# Key derivation
# ---------------------------------------------------------------------------


def derive_cache_key(source_path: str | Path, config: TransformConfig) -> str:
    """Fingerprint a transform request.

    The fingerprint covers the source path exactly as given and every
    config field except the cache location options, serialised as
    canonical JSON so that field order never changes the key.

    Args:
        source_path: Path of the source image.
        config: The user-supplied transform configuration.

    Returns:
        A 32-character lowercase hexadecimal key.
    """
    payload = {
        "src": str(source_path),
        "config": config.model_dump(mode="json", exclude=_KEY_EXCLUDED_FIELDS),
    }
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.md5(canonical.encode("utf-8")).hexdigest()  # noqa: S324


def cache_relative_path(key: str) -> Path:
    """Map a cache key to its sharded path relative to the cache root."""
    return Path(key[:2]) / key[2:4] / f"{key}{CACHE_EXTENSION}"


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class CacheStore:
    """Filesystem-backed key/value store for encoded thumbnails.

    Args:
        root: Cache root directory. It does not need to exist until the
            first write.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, key: str) -> Path:
        """Return the absolute entry path for *key* (nothing is created)."""
        return self._root / cache_relative_path(key)

    def exists(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def read(self, key: str) -> bytes:
        """Return the stored bytes for *key*.

        Raises:
            CacheMissError: If no entry exists for *key*.
            CacheReadError: If the entry exists but cannot be read.
        """
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except (FileNotFoundError, NotADirectoryError) as exc:
            raise CacheMissError(f"No cache entry for key {key}") from exc
        except OSError as exc:
            raise CacheReadError(f"Couldn't read cache entry {path}: {exc}") from exc

    def write(self, key: str, data: bytes) -> Path:
        """Store *data* under *key*, creating shard directories as needed.

        The write is all-or-nothing: on failure the temporary file is
        removed and any previous entry stays untouched.

        Args:
            key: The cache key.
            data: Encoded image bytes.

        Returns:
            The final path of the entry.

        Raises:
            CacheWriteError: If a directory or the file cannot be written.
        """
        path = self.path_for(key)
        try:
            self._provision(path.parent)
        except OSError as exc:
            raise CacheWriteError(
                f"Couldn't create cache directory {path.parent}: {exc}"
            ) from exc

        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{key}.", suffix=".tmp", dir=path.parent
            )
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            # mkstemp creates 0600 files; entries must be readable by others.
            os.chmod(tmp_name, _FILE_MODE)
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise CacheWriteError(f"Couldn't write cache entry {path}: {exc}") from exc

        logger.debug("Stored cache entry %s (%d bytes)", path, len(data))
        return path

    def _provision(self, shard_dir: Path) -> None:
        """Create both shard levels with permissive modes, tolerating races."""
        if shard_dir.is_dir():
            return
        shard_dir.mkdir(mode=_DIR_MODE, parents=True, exist_ok=True)
        # mkdir's mode is filtered by the umask.
        for directory in (shard_dir.parent, shard_dir):
            try:
                directory.chmod(_DIR_MODE)
            except PermissionError:
                logger.debug("Could not chmod %s", directory)
