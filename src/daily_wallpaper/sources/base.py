"""Abstract interface for image downloaders.

The cache only needs something that can write an image's bytes to a path.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from ..cache.base import ImageMetadata


class ImageDownloader(ABC):
    """Writes the bytes of an image to local disk."""

    @abstractmethod
    async def download_to(self, metadata: ImageMetadata, destination: Path) -> None:
        """Stream the image addressed by ``metadata.image_uri`` into ``destination``.

        Any existing file at ``destination`` is overwritten.

        Args:
            metadata: Metadata of the image to download
            destination: File to create or truncate

        Raises:
            RemoteError: If the server responds with a non-success status or
                the transfer fails
            OSError: If the destination cannot be written

        """
        pass
