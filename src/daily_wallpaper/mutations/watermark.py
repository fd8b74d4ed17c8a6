"""
Descriptive text watermark.

Draws the image's caption onto its bottom-left corner over a translucent
black box, so the wallpaper carries its own description.
"""

from loguru import logger
from PIL import Image as PILImage
from PIL import ImageDraw, ImageFont

from ..cache.base import ImageMetadata
from .base import ImageMutation

# Tried in order; Pillow's bundled font is used when none is installed
FONT_CANDIDATES = ("arial.ttf", "Arial.ttf", "DejaVuSans.ttf")

BOX_OPACITY = 0.4


class DescriptiveTextMutation(ImageMutation):
    """Writes ``metadata.caption`` onto the image."""

    def __init__(self, font_size: int = 28, padding: int = 10):
        self.font_size = font_size
        self.padding = padding
        self._font: ImageFont.FreeTypeFont | ImageFont.ImageFont | None = None

    @property
    def font(self) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        if self._font is None:
            self._font = self._load_font()
        return self._font

    def _load_font(self) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        for name in FONT_CANDIDATES:
            try:
                return ImageFont.truetype(name, self.font_size)
            except OSError:
                continue
        logger.debug("No TrueType font found, using Pillow default font")
        return ImageFont.load_default(size=self.font_size)

    def apply(self, image: PILImage.Image, metadata: ImageMetadata) -> PILImage.Image:
        text = metadata.caption
        if not text:
            return image

        base = image.convert("RGBA")
        overlay = PILImage.new("RGBA", base.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)

        left, top, right, bottom = draw.textbbox((0, 0), text, font=self.font)
        text_width, text_height = right - left, bottom - top
        x = self.padding
        y = base.height - text_height - 2 * self.padding

        half = self.padding / 2
        draw.rectangle(
            (x - half, y - half, x + text_width + half, y + text_height + half),
            fill=(0, 0, 0, int(255 * BOX_OPACITY)),
        )
        draw.text((x - left, y - top), text, font=self.font, fill=(255, 255, 255, 255))

        result = PILImage.alpha_composite(base, overlay)
        return result if image.mode == "RGBA" else result.convert("RGB")
