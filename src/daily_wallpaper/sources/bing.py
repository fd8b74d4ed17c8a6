"""Bing image-of-the-day client.

Fetches image metadata from Bing's HPImageArchive endpoint and downloads the
images themselves. The archive only reaches back 14 days and serves at most
7 records per request, so longer requests are split into batches.
"""

from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import urljoin, urlsplit

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from ..cache.base import ImageMetadata
from ..errors import InvalidRangeError, RemoteError
from .base import ImageDownloader

BING_HOST = "https://www.bing.com"
ARCHIVE_URL = f"{BING_HOST}/HPImageArchive.aspx"

# Bing only keeps the last 14 days, even with indexed batching
MAX_FETCHABLE = 14

# Records returned per HPImageArchive call
BATCH_SIZE = 7

DEFAULT_RESOLUTION_SUFFIX = "_1920x1080.jpg"


class ArchiveImage(BaseModel):
    """One image record as returned by HPImageArchive."""

    startdate: str
    url: str | None = None
    urlbase: str | None = None
    copyright: str = ""
    title: str = ""


class ArchiveResponse(BaseModel):
    """Response body of HPImageArchive."""

    images: list[ArchiveImage]


def extract_image_id(uri: str) -> str:
    """
    Return the raw value of the ``id`` query parameter, or ``""`` when absent.

    The value is not percent-decoded, so an escaped ``/`` stays part of the
    file name instead of becoming a path separator.
    """
    for pair in urlsplit(uri).query.split("&"):
        key, _, value = pair.partition("=")
        if key.lower() == "id":
            return value
    return ""


def to_image_metadata(raw: ArchiveImage, discovered_at: datetime | None = None) -> ImageMetadata:
    """
    Convert a raw archive record into ImageMetadata.

    Args:
        raw: Record from the archive response
        discovered_at: Observation time; defaults to now (UTC)

    Returns:
        Normalized ImageMetadata

    Raises:
        ValueError: If ``startdate`` is not a YYYYMMDD string or no image
            path is present
    """
    if raw.url:
        image_uri = urljoin(BING_HOST, raw.url)
    elif raw.urlbase:
        image_uri = urljoin(BING_HOST, raw.urlbase + DEFAULT_RESOLUTION_SUFFIX)
    else:
        raise ValueError("Image record has neither 'url' nor 'urlbase'")

    return ImageMetadata(
        id=extract_image_id(image_uri),
        source_date=datetime.strptime(raw.startdate, "%Y%m%d").date(),
        discovered_at=discovered_at or datetime.now(timezone.utc),
        title=raw.title,
        descriptive_text=raw.copyright,
        image_uri=image_uri,
        base_uri=urljoin(BING_HOST, raw.urlbase) if raw.urlbase else None,
    )


class BingImageClient(ImageDownloader):
    """Client for the Bing image-of-the-day archive."""

    def __init__(self, market: str = "en-US", timeout: int = 30):
        """
        Initialize the client.

        Args:
            market: Market code passed as ``mkt`` (e.g. 'en-US', 'de-DE')
            timeout: HTTP request timeout in seconds
        """
        self.market = market
        self.timeout = timeout

    async def fetch_current(self) -> ImageMetadata:
        """Fetch the metadata of today's image."""
        return (await self.fetch_latest(1))[0]

    async def fetch_latest(self, n: int) -> list[ImageMetadata]:
        """
        Fetch metadata for the latest ``n`` images, oldest first.

        Batches are requested one after another; a failure in any batch
        aborts the whole fetch.

        Args:
            n: Number of images, between 1 and MAX_FETCHABLE

        Returns:
            ``n`` ImageMetadata records sorted by source date ascending

        Raises:
            InvalidRangeError: If ``n`` is out of range (no request is made)
            RemoteError: If a request fails or a response cannot be parsed
        """
        if n < 1 or n > MAX_FETCHABLE:
            raise InvalidRangeError(n, 1, MAX_FETCHABLE)

        raw_images: list[ArchiveImage] = []
        offset = 0
        remaining = n

        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            while remaining > 0:
                batch_size = min(BATCH_SIZE, remaining)
                raw_images.extend(await self._fetch_batch(client, offset, batch_size))
                remaining -= batch_size
                offset += batch_size

        try:
            images = [to_image_metadata(raw) for raw in raw_images]
        except ValueError as e:
            raise RemoteError(f"Malformed image record in archive response: {e}") from e

        logger.debug("Fetched metadata for {} images", len(images))
        return sorted(images, key=lambda image: image.source_date)

    async def _fetch_batch(
        self, client: httpx.AsyncClient, offset: int, batch_size: int
    ) -> list[ArchiveImage]:
        """Request one page of the archive."""
        params = {"format": "js", "idx": offset, "n": batch_size, "mkt": self.market}
        logger.debug("Requesting archive batch: idx={}, n={}", offset, batch_size)

        try:
            response = await client.get(ARCHIVE_URL, params=params)
        except httpx.HTTPError as e:
            raise RemoteError(f"Request to image archive failed: {e}", url=ARCHIVE_URL) from e

        if not response.is_success:
            raise RemoteError(
                f"Image archive returned HTTP {response.status_code}",
                url=str(response.url),
                status_code=response.status_code,
            )

        try:
            return ArchiveResponse.model_validate_json(response.content).images
        except ValidationError as e:
            raise RemoteError(
                f"Could not parse image archive response: {e}", url=str(response.url)
            ) from e

    async def download_to(self, metadata: ImageMetadata, destination: Path) -> None:
        """
        Stream an image to ``destination``, overwriting any existing file.

        Args:
            metadata: Metadata of the image to download
            destination: File to write

        Raises:
            RemoteError: On a non-success status or transport failure
            OSError: If the destination cannot be written
        """
        destination = Path(destination)
        logger.debug("Downloading {} to {}", metadata.image_uri, destination)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                async with client.stream("GET", metadata.image_uri) as response:
                    if not response.is_success:
                        raise RemoteError(
                            f"Image download returned HTTP {response.status_code}",
                            url=metadata.image_uri,
                            status_code=response.status_code,
                        )
                    with destination.open("wb") as f:
                        async for chunk in response.aiter_bytes():
                            f.write(chunk)
        except httpx.HTTPError as e:
            raise RemoteError(
                f"Image download failed: {e}", url=metadata.image_uri
            ) from e

        logger.debug("Saved image {} ({} bytes)", metadata.id, destination.stat().st_size)
