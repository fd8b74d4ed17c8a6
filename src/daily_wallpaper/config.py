"""Configuration management using pydantic-settings.

Loads from environment variables and .env file.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Attributes:
        cache_directory: Directory holding cached images and the manifest.
        max_cache_size: Maximum number of images kept in the cache.
        manifest_file_name: File name of the cache manifest inside cache_directory.
        market: Bing market code used when fetching metadata.
        request_timeout: HTTP timeout in seconds.
        watermark: Draw the image description onto fetched images by default.
        watermark_font_size: Font size for the description watermark.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_json: Output logs in JSON format.
        log_file: Optional file that also receives log records.

    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Cache
    cache_directory: str = "~/.cache/daily-wallpaper"
    max_cache_size: int = 7
    manifest_file_name: str = "manifest.json"

    # Remote service
    market: str = "en-US"
    request_timeout: int = 30

    # Post-processing
    watermark: bool = False
    watermark_font_size: int = 28

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    log_file: str | None = None

    @property
    def cache_path(self) -> Path:
        """Return the cache directory as an expanded Path object.

        Returns:
            Path: Cache directory with ``~`` expanded.

        """
        return Path(self.cache_directory).expanduser()

    @property
    def manifest_path(self) -> Path:
        """Return the full path of the cache manifest.

        Returns:
            Path: Manifest file inside the cache directory.

        """
        return self.cache_path / self.manifest_file_name


# Global settings instance
settings = Settings()
