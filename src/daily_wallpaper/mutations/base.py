"""Abstract base class for image mutations."""

from abc import ABC, abstractmethod

from PIL import Image as PILImage

from ..cache.base import ImageMetadata


class ImageMutation(ABC):
    """A transformation applied to a downloaded image before it is cached."""

    @abstractmethod
    def apply(self, image: PILImage.Image, metadata: ImageMetadata) -> PILImage.Image:
        """Transform an image.

        Args:
            image: Image to transform
            metadata: Metadata of the image

        Returns:
            The transformed image (may be ``image`` itself)

        """
        pass
