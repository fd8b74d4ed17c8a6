"""
Image mutation package.

Provides optional post-processing applied to images between download and
caching.
"""

from .base import ImageMutation
from .pipeline import MutationPipeline
from .watermark import DescriptiveTextMutation

__all__ = [
    "ImageMutation",
    "MutationPipeline",
    "DescriptiveTextMutation",
]
