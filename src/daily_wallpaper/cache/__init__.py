"""
Image cache package.

Provides the bounded on-disk image cache and its metadata models.
"""

from .base import CacheManifest, ImageMetadata
from .cache import ImageCache

__all__ = [
    "CacheManifest",
    "ImageMetadata",
    "ImageCache",
]
