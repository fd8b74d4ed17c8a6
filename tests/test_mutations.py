"""
Tests for image mutations.

Tests MutationPipeline ordering and output, and DescriptiveTextMutation.
"""

from datetime import date

import pytest
from PIL import Image

from daily_wallpaper.mutations import DescriptiveTextMutation, ImageMutation, MutationPipeline


class RecordingMutation(ImageMutation):
    """Mutation that records its calls and paints one pixel."""

    def __init__(self, name: str, calls: list, color: tuple[int, int, int]):
        self.name = name
        self.calls = calls
        self.color = color

    def apply(self, image, metadata):
        self.calls.append((self.name, metadata.id))
        image.putpixel((0, 0), self.color)
        return image


@pytest.fixture
def source_image(temp_dir):
    """Write a plain grey PNG to disk."""
    path = temp_dir / "source.tmp"
    Image.new("RGB", (320, 180), color=(128, 128, 128)).save(path, format="PNG")
    return path


class TestMutationPipeline:
    """Test MutationPipeline class."""

    def test_requires_mutations(self):
        """Test an empty pipeline is rejected."""
        with pytest.raises(ValueError, match="at least one mutation"):
            MutationPipeline()

    def test_runs_mutations_in_order(self, temp_dir, source_image, make_metadata):
        """Test mutations run in the given order and the last one wins."""
        calls = []
        pipeline = MutationPipeline(
            RecordingMutation("first", calls, (255, 0, 0)),
            RecordingMutation("second", calls, (0, 255, 0)),
        )
        output = temp_dir / "output"

        pipeline.run(source_image, make_metadata("img", date(2024, 1, 1)), output)

        assert calls == [("first", "img"), ("second", "img")]
        with Image.open(output) as result:
            assert result.getpixel((0, 0)) == (0, 255, 0)

    def test_keeps_source_format(self, temp_dir, source_image, make_metadata):
        """Test the output uses the source format even without an extension."""
        pipeline = MutationPipeline(RecordingMutation("only", [], (0, 0, 0)))
        output = temp_dir / "OHR.Image_EN-US1"

        pipeline.run(source_image, make_metadata("img", date(2024, 1, 1)), output)

        with Image.open(output) as result:
            assert result.format == "PNG"
            assert result.size == (320, 180)

    def test_missing_source_raises(self, temp_dir, make_metadata):
        """Test a missing source file raises an OSError."""
        pipeline = MutationPipeline(RecordingMutation("only", [], (0, 0, 0)))

        with pytest.raises(OSError):
            pipeline.run(temp_dir / "nope", make_metadata("img", date(2024, 1, 1)), temp_dir / "out")


class TestDescriptiveTextMutation:
    """Test DescriptiveTextMutation class."""

    def test_draws_caption(self, make_metadata):
        """Test the caption changes the bottom of the image only."""
        image = Image.new("RGB", (640, 360), color=(200, 200, 200))
        metadata = make_metadata(
            "img", date(2024, 1, 1), descriptive_text="Northern lights (© Someone)"
        )

        result = DescriptiveTextMutation(font_size=20).apply(image, metadata)

        assert result.size == (640, 360)
        assert result.mode == "RGB"
        assert result.getpixel((320, 10)) == (200, 200, 200)
        assert result.getpixel((6, 340)) != (200, 200, 200)

    def test_empty_caption_is_noop(self, make_metadata):
        """Test an image without descriptive text is returned unchanged."""
        image = Image.new("RGB", (64, 64), color=(10, 20, 30))
        metadata = make_metadata("img", date(2024, 1, 1), descriptive_text="(© Someone)")

        result = DescriptiveTextMutation().apply(image, metadata)

        assert result is image

    def test_keeps_alpha_channel(self, make_metadata):
        """Test RGBA images stay RGBA."""
        image = Image.new("RGBA", (320, 180), color=(0, 0, 255, 255))

        result = DescriptiveTextMutation(font_size=16).apply(
            image, make_metadata("img", date(2024, 1, 1))
        )

        assert result.mode == "RGBA"

    def test_pipeline_writes_jpeg(self, temp_dir, sample_image_bytes, make_metadata):
        """Test a watermarked JPEG is saved as a JPEG of the same size."""
        source = temp_dir / "img.tmp"
        source.write_bytes(sample_image_bytes)
        output = temp_dir / "img"
        pipeline = MutationPipeline(DescriptiveTextMutation(font_size=12))

        pipeline.run(source, make_metadata("img", date(2024, 1, 1)), output)

        with Image.open(output) as result:
            assert result.format == "JPEG"
            assert result.size == (200, 100)
