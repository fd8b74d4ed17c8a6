"""Image source package.

Provides the Bing image-of-the-day client and the downloader interface the
cache depends on.
"""

from .base import ImageDownloader
from .bing import BATCH_SIZE, MAX_FETCHABLE, BingImageClient

__all__ = [
    "BATCH_SIZE",
    "MAX_FETCHABLE",
    "BingImageClient",
    "ImageDownloader",
]
