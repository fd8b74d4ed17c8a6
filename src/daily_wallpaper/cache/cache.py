"""
Bounded image cache.

Keeps up to ``max_entries`` images in a directory, one file per image named
by its ID, plus a JSON manifest describing them. When full, the image with
the oldest source date is evicted to make room for a new one.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from ..errors import InvalidImageIdError
from .base import CacheManifest, ImageMetadata

if TYPE_CHECKING:
    from ..mutations import MutationPipeline
    from ..sources.base import ImageDownloader

MANIFEST_FILE_NAME = "manifest.json"


def _age_key(image: ImageMetadata) -> tuple:
    # Same-day images are ordered by ID so eviction is deterministic
    return (image.source_date, image.id)


class ImageCache:
    """Manages the cached images and their manifest."""

    def __init__(
        self,
        directory: Path | str,
        max_entries: int,
        manifest_path: Path | str | None = None,
    ):
        """
        Create a cache handle without touching the filesystem.

        Use ImageCache.open() to get a ready-to-use cache.

        Args:
            directory: Directory holding the cached image files
            max_entries: Maximum number of images kept
            manifest_path: Manifest location (default: ``directory/manifest.json``)

        Raises:
            ValueError: If max_entries is less than 1
        """
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")

        self.directory = Path(directory).expanduser().resolve()
        self.max_entries = max_entries
        self.manifest_path = (
            Path(manifest_path).expanduser().resolve()
            if manifest_path is not None
            else self.directory / MANIFEST_FILE_NAME
        )
        self._index: dict[str, ImageMetadata] = {}

    @classmethod
    def open(
        cls,
        directory: Path | str,
        max_entries: int,
        manifest_path: Path | str | None = None,
    ) -> ImageCache:
        """
        Open the cache, creating its directory and loading the manifest.

        Manifest records whose image file no longer exists are dropped.
        A missing or unreadable manifest gives an empty cache.
        """
        cache = cls(directory, max_entries, manifest_path)
        cache.directory.mkdir(parents=True, exist_ok=True)
        cache.reload()
        logger.debug(
            "ImageCache opened: dir={}, max_entries={}, cached={}",
            cache.directory,
            cache.max_entries,
            len(cache),
        )
        return cache

    def __len__(self) -> int:
        return len(self._index)

    @property
    def entries(self) -> list[ImageMetadata]:
        """Cached images, oldest first."""
        return sorted(self._index.values(), key=_age_key)

    def reload(self) -> None:
        """Replace the in-memory index with the manifest on disk."""
        self._index.clear()

        manifest = self._load_manifest()
        for image in manifest.images:
            try:
                path = self.make_image_file_path(image)
            except InvalidImageIdError as e:
                logger.warning("Pruning manifest entry: {}", e)
                continue
            if path.exists():
                self._index[image.id] = image
            else:
                logger.debug("Pruning {} from index: image file missing", image.id)

    def _load_manifest(self) -> CacheManifest:
        """Load the manifest from disk."""
        if not self.manifest_path.exists():
            return CacheManifest()
        try:
            manifest = CacheManifest.model_validate_json(self.manifest_path.read_bytes())
            logger.debug("Loaded manifest with {} images", len(manifest.images))
            return manifest
        except (OSError, ValueError) as e:
            logger.warning("Could not load cache manifest {}: {}", self.manifest_path, e)
            return CacheManifest()

    def save_manifest(self) -> None:
        """Write the manifest, replacing the previous file atomically."""
        manifest = CacheManifest(images=list(self._index.values()))
        tmp_path = self.manifest_path.with_name(f"{self.manifest_path.name}.tmp")
        tmp_path.write_text(manifest.model_dump_json(indent=2, by_alias=True))
        tmp_path.replace(self.manifest_path)
        logger.debug("Saved manifest to {}", self.manifest_path)

    def make_image_file_path(self, image: ImageMetadata) -> Path:
        """
        Return the absolute path where an image's file lives.

        Raises:
            InvalidImageIdError: If the ID would name a file outside the
                cache directory
        """
        if image.id in (".", "..") or Path(image.id).name != image.id:
            raise InvalidImageIdError(image.id)
        return self.directory / image.id

    def contains(self, image: ImageMetadata) -> bool:
        """Check that an image is indexed and its file is on disk."""
        return image.id in self._index and self.make_image_file_path(image).exists()

    def get_latest(self) -> ImageMetadata | None:
        """Return the cached image with the newest source date, if any."""
        if not self._index:
            return None
        return max(self._index.values(), key=_age_key)

    async def download_and_cache(
        self,
        image: ImageMetadata,
        downloader: ImageDownloader,
        mutation_pipeline: MutationPipeline | None = None,
        *,
        overwrite: bool = False,
    ) -> bool:
        """
        Download an image into the cache unless it is already there.

        Args:
            image: Metadata of the image to cache
            downloader: Used to fetch the image bytes
            mutation_pipeline: Optional mutations applied before the image
                is moved into place
            overwrite: Re-download even if the image is already cached

        Returns:
            True if the image was added, False if it was already cached

        Raises:
            InvalidImageIdError: If the image ID is not a plain file name
            RemoteError: If the download fails
            OSError: If a file cannot be written or removed
        """
        final_path = self.make_image_file_path(image)

        if self.contains(image):
            if not overwrite:
                logger.debug("Image already cached: {}", image.id)
                return False
            self._remove(image)
        else:
            # Entry whose file was deleted outside the cache
            self._index.pop(image.id, None)

        while len(self._index) + 1 > self.max_entries:
            self._evict_oldest()

        if mutation_pipeline is None:
            await downloader.download_to(image, final_path)
        else:
            download_path = final_path.with_name(f"{final_path.name}.tmp")
            await downloader.download_to(image, download_path)
            mutation_pipeline.run(download_path, image, final_path)
            download_path.unlink()

        self._index[image.id] = image
        self.save_manifest()
        logger.info("Cached image {} ({})", image.id, image.source_date)
        return True

    def _evict_oldest(self) -> ImageMetadata:
        """Remove the oldest image from the index and disk, without saving."""
        oldest = min(self._index.values(), key=_age_key)
        self._remove(oldest)
        logger.info("Evicted image {} ({})", oldest.id, oldest.source_date)
        return oldest

    def _remove(self, image: ImageMetadata) -> None:
        self.make_image_file_path(image).unlink(missing_ok=True)
        self._index.pop(image.id, None)
