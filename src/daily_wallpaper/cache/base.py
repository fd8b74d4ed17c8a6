"""
Data models for the image cache.

Provides Pydantic models for image metadata and the persisted cache manifest.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

MANIFEST_COMMENT = (
    "This file was created by daily-wallpaper and lists the images cached in this "
    "directory. Do not edit it unless you know what you're doing!"
)


class ImageMetadata(BaseModel):
    """Metadata about one image-of-the-day."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Image identifier taken from the 'id' query parameter")
    source_date: date = Field(description="Date the service published the image")
    discovered_at: datetime = Field(description="When the image was first seen locally")
    title: str = Field(default="", description="Image title")
    descriptive_text: str = Field(
        default="", description="Copyright line, including a short description of the image"
    )
    image_uri: str = Field(description="Absolute URI of the full-resolution image")
    base_uri: str | None = Field(
        default=None,
        description="Absolute URI that takes a resolution suffix, e.g. '_UHD.jpg'",
    )

    @property
    def caption(self) -> str:
        """Descriptive text without its trailing '(...)' attribution."""
        text = self.descriptive_text
        if "(" in text:
            text = text[: text.rindex("(")]
        return text.strip()


class CacheManifest(BaseModel):
    """On-disk record of the images believed to be cached."""

    model_config = ConfigDict(populate_by_name=True)

    comment: str = Field(default=MANIFEST_COMMENT, alias="$comment")
    images: list[ImageMetadata] = Field(default_factory=list)
