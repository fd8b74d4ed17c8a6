"""
daily-wallpaper.

Fetches Bing's image of the day into a bounded local cache and reports the
newest cached image, e.g. for use as a desktop wallpaper.

Usage:
    # Cache the last three images
    daily-wallpaper fetch -n 3

    # Print the path of the newest cached image
    daily-wallpaper latest --fetch

    # Show configuration and cache status
    daily-wallpaper info
"""

__version__ = "0.1.0"

from .cache import CacheManifest, ImageCache, ImageMetadata
from .errors import DailyWallpaperError, InvalidImageIdError, InvalidRangeError, RemoteError
from .sources import BingImageClient, ImageDownloader

__all__ = [
    "BingImageClient",
    "CacheManifest",
    "DailyWallpaperError",
    "ImageCache",
    "ImageDownloader",
    "ImageMetadata",
    "InvalidImageIdError",
    "InvalidRangeError",
    "RemoteError",
]
