"""Application settings loaded from environment and .env files."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global configuration for the thumbcache application.

    Values are loaded in order: field defaults → .env file → environment
    variables. Environment variables are prefixed with ``THUMBCACHE_``.

    Attributes:
        cache_dir: Root of the sharded thumbnail cache. ``None`` means the
            system temporary directory is used whenever caching is enabled.
        no_cache: Disable the cache entirely (every request regenerates).
        default_quality: JPEG quality used when a request sets none.
        config_file: Optional INI file with transform presets.
        base_section: INI section merged into every request before the
            named preset section.
        upload_formats: Allowed upload extensions in the preview UI
            (lowercase, without dot).
        max_upload_mb: Maximum upload file size in the preview UI.
        error_image_width: Width in pixels of rendered error images.
    """

    model_config = SettingsConfigDict(
        env_prefix="THUMBCACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # --- Cache ---
    cache_dir: Path | None = None
    no_cache: bool = True

    # --- Transform defaults ---
    default_quality: int = 100
    config_file: Path | None = None
    base_section: str = "getthumb"

    # --- Presentation ---
    upload_formats: list[str] = ["jpg", "jpeg", "png", "gif"]
    max_upload_mb: float = 10.0
    error_image_width: int = 300
