"""
Mutation pipeline.

Loads a downloaded image, runs an ordered list of mutations over it and
writes the result to its final location.
"""

from pathlib import Path

from loguru import logger
from PIL import Image as PILImage

from ..cache.base import ImageMetadata
from .base import ImageMutation


class MutationPipeline:
    """An ordered sequence of ImageMutation objects."""

    def __init__(self, *mutations: ImageMutation):
        if not mutations:
            raise ValueError("A mutation pipeline needs at least one mutation")
        self.mutations = list(mutations)

    def run(self, source_path: Path, metadata: ImageMetadata, output_path: Path) -> None:
        """
        Apply every mutation to the image at ``source_path`` and save it.

        The output keeps the source image's format, since cached files are
        named by image ID rather than by extension.

        Args:
            source_path: Downloaded image
            metadata: Metadata passed to each mutation
            output_path: Where to write the mutated image
        """
        with PILImage.open(source_path) as source:
            image_format = source.format
            image = source.copy()

        for mutation in self.mutations:
            logger.debug("Applying {} to {}", type(mutation).__name__, metadata.id)
            image = mutation.apply(image, metadata)

        if image_format == "JPEG" and image.mode != "RGB":
            image = image.convert("RGB")
        image.save(output_path, format=image_format)
        logger.debug("Wrote mutated image to {}", output_path)
