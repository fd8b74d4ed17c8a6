"""Pytest fixtures and configuration for daily-wallpaper tests.

This module provides shared fixtures for testing the image cache, the Bing
client, the mutation pipeline and the CLI.
"""

import tempfile
from collections.abc import Callable, Generator
from datetime import date, datetime, timezone
from io import BytesIO
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image

from daily_wallpaper.cache.base import ImageMetadata
from daily_wallpaper.sources.base import ImageDownloader

# --- Temporary Directory Fixtures ---


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp)


@pytest.fixture
def temp_cache_dir(temp_dir: Path) -> Path:
    """Return a (not yet created) directory for the image cache."""
    return temp_dir / "cache"


# --- Sample Data Fixtures ---


@pytest.fixture
def make_metadata() -> Callable[..., ImageMetadata]:
    """Return a factory for ImageMetadata records keyed by id and date."""

    def _make(image_id: str, source_date: date, **overrides) -> ImageMetadata:
        fields = {
            "id": image_id,
            "source_date": source_date,
            "discovered_at": datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc),
            "title": f"Title {image_id}",
            "descriptive_text": f"Description of {image_id} (© Photographer/Agency)",
            "image_uri": f"https://www.bing.com/th?id={image_id}&rf=LaDigue_1920x1080.jpg",
        }
        fields.update(overrides)
        return ImageMetadata(**fields)

    return _make


@pytest.fixture
def sample_image_bytes() -> bytes:
    """Create sample JPEG bytes for testing."""
    # Create a simple 200x100 blue image
    img = Image.new("RGB", (200, 100), color="blue")
    buffer = BytesIO()
    img.save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def sample_archive_image() -> Callable[..., dict]:
    """Return a factory for raw HPImageArchive image records."""

    def _make(startdate: str, image_id: str | None = None) -> dict:
        image_id = image_id or f"OHR.Image{startdate}_EN-US000"
        return {
            "startdate": startdate,
            "url": f"/th?id={image_id}_1920x1080.jpg&rf=LaDigue_1920x1080.jpg&pid=hp",
            "urlbase": f"/th?id={image_id}",
            "copyright": f"Scenery of {startdate} (© Someone/Getty Images)",
            "title": f"Image {startdate}",
        }

    return _make


# --- Mock Downloader Fixtures ---


@pytest.fixture
def mock_downloader(sample_image_bytes: bytes) -> ImageDownloader:
    """Create a downloader that writes sample_image_bytes to the destination."""
    downloader = MagicMock(spec=ImageDownloader)

    async def mock_download_to(metadata: ImageMetadata, destination: Path) -> None:
        """Write the sample image to destination."""
        Path(destination).write_bytes(sample_image_bytes)

    downloader.download_to = AsyncMock(side_effect=mock_download_to)
    return downloader
