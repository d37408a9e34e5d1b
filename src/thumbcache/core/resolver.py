"""Merge defaults, INI presets and request options into a ``TransformConfig``.

Options are layered in this order, later layers winning:

1. ``Settings`` defaults (quality, cache location);
2. the ``[getthumb]`` section of the INI file (``Settings.base_section``);
3. the named preset section of the INI file;
4. per-request options.

Request options can never change ``cache_dir`` or ``no_cache``: where the
cache lives is decided by the operator, not by the caller.

Typical usage::

    from thumbcache.core.resolver import resolve_config

    config = resolve_config({"config": "avatar", "width": "64"})
"""

from __future__ import annotations

import configparser
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from thumbcache.config import Settings
from thumbcache.errors import InvalidConfigError
from thumbcache.schemas import TransformConfig

logger = logging.getLogger(__name__)

PROTECTED_OPTIONS = frozenset({"cache_dir", "no_cache"})
OPTION_NAMES = frozenset(TransformConfig.model_fields)

# Request option that selects the INI preset section.
SECTION_OPTION = "config"


def _is_unset(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


class ConfigResolver:
    """Accumulates configuration layers and builds the final config.

    Args:
        settings: Application settings providing the defaults.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings if settings is not None else Settings()
        self._options: dict[str, Any] = {
            "quality": self._settings.default_quality,
            "no_cache": self._settings.no_cache,
            "cache_dir": self._settings.cache_dir,
        }

    @property
    def options(self) -> dict[str, Any]:
        """A copy of the merged, not yet validated options."""
        return dict(self._options)

    def load_file(self, path: str | Path, section: str | None = None) -> None:
        """Merge the base section and *section* of an INI file.

        A missing file or section is ignored. Unlike request options, the
        file may set the protected cache options.

        Args:
            path: Path of the INI file.
            section: Optional preset section merged after the base section.

        Raises:
            InvalidConfigError: If the file exists but cannot be parsed.
        """
        parser = configparser.ConfigParser(interpolation=None)
        try:
            found = parser.read(path, encoding="utf-8")
        except configparser.Error as exc:
            raise InvalidConfigError(f"Can't parse config file {path}: {exc}") from exc

        if not found:
            logger.debug("Config file %s not found, skipping.", path)
            return

        for name in (self._settings.base_section, section):
            if not name or not parser.has_section(name):
                continue
            for key, raw in parser.items(name):
                value = _unquote(raw)
                if key not in OPTION_NAMES:
                    logger.debug("Ignoring unknown option '%s' in [%s].", key, name)
                elif not _is_unset(value):
                    self._options[key] = value

    def set_option(self, name: str, value: Any) -> None:
        """Set a request option.

        Unknown and protected names are ignored. A blank value leaves the
        lower layers in place.
        """
        if name not in OPTION_NAMES or name in PROTECTED_OPTIONS:
            return
        if _is_unset(value):
            return
        self._options[name] = value

    def set_options(self, options: Mapping[str, Any]) -> None:
        """Set several request options at once (see ``set_option``)."""
        for name, value in options.items():
            self.set_option(name, value)

    def resolve(self) -> TransformConfig:
        """Validate the merged options into an immutable config.

        Empty strings and ``None`` count as unset and fall back to the
        field default.

        Raises:
            InvalidConfigError: If an option has an invalid value.
        """
        values = {
            name: value
            for name, value in self._options.items()
            if not _is_unset(value)
        }
        try:
            return TransformConfig(**values)
        except ValidationError as exc:
            raise InvalidConfigError(f"Invalid thumbnail configuration:\n{exc}") from exc


def resolve_config(
    request_options: Mapping[str, Any],
    settings: Settings | None = None,
) -> TransformConfig:
    """Build the config for one request, the way the HTTP front end does.

    The ``config`` request option names the INI preset section; the INI
    file itself comes from ``Settings.config_file``.

    Args:
        request_options: Raw per-request options (e.g. query parameters).
        settings: Application settings.

    Returns:
        The finalized ``TransformConfig``.
    """
    settings = settings if settings is not None else Settings()
    resolver = ConfigResolver(settings)
    if settings.config_file is not None:
        resolver.load_file(settings.config_file, request_options.get(SECTION_OPTION))
    resolver.set_options(request_options)
    return resolver.resolve()
