"""Tests for thumbcache.core.codec and thumbcache.core.formats."""

import io
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from thumbcache.core import formats
from thumbcache.core.codec import Codec, PillowCodec
from thumbcache.errors import (
    CanvasAllocationError,
    DecodeError,
    InvalidSourceImageError,
    UnsupportedSourceFormatError,
)
from thumbcache.schemas import ImageFormat, Rect


@pytest.fixture
def codec() -> PillowCodec:
    return PillowCodec()


# ---------------------------------------------------------------------------
# Format registry
# ---------------------------------------------------------------------------


class TestFormatRegistry:
    """Validate format cards and lookup."""

    def test_exactly_three_formats(self) -> None:
        tags = {card.format for card in formats.get_all_cards()}
        assert tags == {ImageFormat.JPEG, ImageFormat.PNG, ImageFormat.GIF}

    def test_lookup_by_pil_name(self) -> None:
        assert formats.card_for_pil_format("PNG").format is ImageFormat.PNG
        assert formats.card_for_pil_format("MPO").format is ImageFormat.JPEG
        assert formats.card_for_pil_format("BMP") is None
        assert formats.card_for_pil_format(None) is None

    def test_only_transparent_formats_can_overlay(self) -> None:
        assert formats.get_card(ImageFormat.JPEG).overlay_capable is False
        assert formats.get_card(ImageFormat.PNG).overlay_capable is True
        assert formats.get_card(ImageFormat.GIF).overlay_capable is True

    def test_mime_types(self) -> None:
        assert formats.get_card(ImageFormat.JPEG).mime == "image/jpeg"


# ---------------------------------------------------------------------------
# Probe / decode
# ---------------------------------------------------------------------------


class TestProbe:
    """Validate header probing."""

    def test_satisfies_protocol(self, codec: PillowCodec) -> None:
        assert isinstance(codec, Codec)

    def test_jpeg(self, codec: PillowCodec, landscape_jpeg: Path) -> None:
        info = codec.probe(landscape_jpeg)
        assert (info.width, info.height) == (400, 200)
        assert info.format is ImageFormat.JPEG

    def test_png(self, codec: PillowCodec, portrait_png: Path) -> None:
        info = codec.probe(portrait_png)
        assert (info.width, info.height) == (200, 400)
        assert info.format is ImageFormat.PNG

    def test_gif(self, codec: PillowCodec, source_gif: Path) -> None:
        assert codec.probe(source_gif).format is ImageFormat.GIF

    def test_multi_picture_jpeg_is_jpeg(self, codec: PillowCodec, camera_jpeg: Path) -> None:
        info = codec.probe(camera_jpeg)
        assert (info.width, info.height) == (40, 20)
        assert info.format is ImageFormat.JPEG

    def test_unsupported_format(self, codec: PillowCodec, bmp_file: Path) -> None:
        with pytest.raises(UnsupportedSourceFormatError, match="BMP"):
            codec.probe(bmp_file)

    def test_not_an_image(self, codec: PillowCodec, text_file: Path) -> None:
        with pytest.raises(InvalidSourceImageError):
            codec.probe(text_file)

    def test_truncated_file_still_probes(
        self, codec: PillowCodec, truncated_jpeg: Path
    ) -> None:
        assert codec.probe(truncated_jpeg).width == 400


class TestDecode:
    """Validate decoding through the format registry."""

    def test_jpeg_decodes_to_rgb(self, codec: PillowCodec, landscape_jpeg: Path) -> None:
        with codec.decode(codec.probe(landscape_jpeg)) as image:
            assert image.mode == "RGB"
            assert image.size == (400, 200)

    def test_png_decodes_to_rgba(self, codec: PillowCodec, portrait_png: Path) -> None:
        with codec.decode(codec.probe(portrait_png)) as image:
            assert image.mode == "RGBA"

    def test_gif_decodes_to_rgba(self, codec: PillowCodec, overlay_gif: Path) -> None:
        with codec.decode(codec.probe(overlay_gif)) as image:
            assert image.mode == "RGBA"
            assert image.size == (20, 20)

    def test_truncated_data_raises(self, codec: PillowCodec, truncated_jpeg: Path) -> None:
        info = codec.probe(truncated_jpeg)
        with pytest.raises(DecodeError):
            codec.decode(info)


# ---------------------------------------------------------------------------
# Canvas / resample / composite
# ---------------------------------------------------------------------------


class TestCanvas:
    """Validate canvas allocation."""

    def test_black_rgb_canvas(self, codec: PillowCodec) -> None:
        with codec.new_canvas(30, 20) as canvas:
            assert canvas.mode == "RGB"
            assert canvas.size == (30, 20)
            assert canvas.getpixel((0, 0)) == (0, 0, 0)

    @pytest.mark.parametrize("size", [(0, 10), (10, 0), (-1, 5)])
    def test_empty_canvas_raises(self, codec: PillowCodec, size: tuple) -> None:
        with pytest.raises(CanvasAllocationError):
            codec.new_canvas(*size)


class TestResample:
    """Validate source-to-destination rectangle copying."""

    def test_scales_into_dest_rect(self, codec: PillowCodec) -> None:
        src = Image.new("RGB", (40, 40), (255, 255, 255))
        canvas = codec.new_canvas(20, 20)
        codec.resample(canvas, src, Rect(x=0, y=0, w=10, h=10), Rect(w=40, h=40))
        assert canvas.getpixel((5, 5)) == (255, 255, 255)
        assert canvas.getpixel((15, 15)) == (0, 0, 0)

    def test_fractional_source_box(self, codec: PillowCodec) -> None:
        src = Image.new("RGB", (333, 200), (10, 200, 10))
        canvas = codec.new_canvas(100, 100)
        codec.resample(
            canvas, src, Rect(w=100, h=100), Rect(x=66.5, y=0, w=200, h=200)
        )
        assert canvas.getpixel((50, 50)) == (10, 200, 10)

    def test_out_of_bounds_source_is_padded(self, codec: PillowCodec) -> None:
        src = Image.new("RGB", (100, 100), (255, 255, 255))
        canvas = codec.new_canvas(100, 100)
        codec.resample(canvas, src, Rect(w=100, h=100), Rect(x=50, y=0, w=100, h=100))
        assert min(canvas.getpixel((10, 50))) > 245
        assert max(canvas.getpixel((95, 50))) < 10

    def test_transparent_source_blends_onto_black(self, codec: PillowCodec) -> None:
        src = Image.new("RGBA", (10, 10), (255, 255, 255, 0))
        canvas = codec.new_canvas(10, 10)
        codec.resample(canvas, src, Rect(w=10, h=10), Rect(w=10, h=10))
        assert canvas.getpixel((5, 5)) == (0, 0, 0)

    def test_empty_source_is_skipped(self, codec: PillowCodec) -> None:
        src = Image.new("RGB", (10, 10), (255, 255, 255))
        canvas = codec.new_canvas(10, 10)
        codec.resample(canvas, src, Rect(w=10, h=10), Rect(w=0, h=10))
        assert canvas.getpixel((5, 5)) == (0, 0, 0)


class TestComposite:
    """Validate overlay drawing and clipping."""

    def test_draws_at_position(self, codec: PillowCodec) -> None:
        canvas = codec.new_canvas(50, 50)
        overlay = Image.new("RGBA", (10, 10), (255, 0, 0, 255))
        codec.composite(canvas, overlay, (40, 40))
        assert canvas.getpixel((45, 45)) == (255, 0, 0)
        assert canvas.getpixel((35, 35)) == (0, 0, 0)

    def test_fractional_position_is_truncated(self, codec: PillowCodec) -> None:
        canvas = codec.new_canvas(50, 50)
        overlay = Image.new("RGBA", (10, 10), (255, 0, 0, 255))
        codec.composite(canvas, overlay, (40.9, 40.9))
        assert canvas.getpixel((40, 40)) == (255, 0, 0)

    def test_partially_outside_is_clipped(self, codec: PillowCodec) -> None:
        canvas = codec.new_canvas(10, 10)
        overlay = Image.new("RGBA", (20, 20), (255, 0, 0, 255))
        codec.composite(canvas, overlay, (-5, -5))
        assert canvas.getpixel((0, 0)) == (255, 0, 0)

    def test_fully_outside_is_ignored(self, codec: PillowCodec) -> None:
        canvas = codec.new_canvas(10, 10)
        overlay = Image.new("RGBA", (5, 5), (255, 0, 0, 255))
        codec.composite(canvas, overlay, (50, 50))
        assert canvas.getpixel((5, 5)) == (0, 0, 0)

    def test_transparent_pixels_keep_canvas(self, codec: PillowCodec) -> None:
        canvas = codec.new_canvas(10, 10)
        overlay = Image.new("RGBA", (10, 10), (255, 0, 0, 0))
        codec.composite(canvas, overlay, (0, 0))
        assert canvas.getpixel((5, 5)) == (0, 0, 0)


# ---------------------------------------------------------------------------
# Filters / encode
# ---------------------------------------------------------------------------


class TestFilters:
    """Validate brightness and contrast on the GD scale."""

    def test_brightness_adds_offset(self, codec: PillowCodec) -> None:
        image = Image.new("RGB", (4, 4), (100, 100, 100))
        result = codec.apply_brightness(image, 50)
        assert result.getpixel((0, 0)) == (150, 150, 150)

    def test_brightness_clamps(self, codec: PillowCodec) -> None:
        image = Image.new("RGB", (4, 4), (100, 200, 10))
        assert codec.apply_brightness(image, 255).getpixel((0, 0)) == (255, 255, 255)
        assert codec.apply_brightness(image, -255).getpixel((0, 0)) == (0, 0, 0)

    def test_brightness_leaves_input_untouched(self, codec: PillowCodec) -> None:
        image = Image.new("RGB", (4, 4), (100, 100, 100))
        codec.apply_brightness(image, 50)
        assert image.getpixel((0, 0)) == (100, 100, 100)

    def test_zero_contrast_is_neutral(self, codec: PillowCodec, rgb_image: Image.Image) -> None:
        result = codec.apply_contrast(rgb_image, 0)
        diff = np.abs(np.asarray(result, dtype=np.int16) - np.asarray(rgb_image, dtype=np.int16))
        assert diff.max() <= 1

    def test_negative_contrast_stretches(self, codec: PillowCodec, rgb_image: Image.Image) -> None:
        result = codec.apply_contrast(rgb_image, -127.5)
        assert np.asarray(result).std() > np.asarray(rgb_image).std()

    def test_positive_contrast_flattens(self, codec: PillowCodec, rgb_image: Image.Image) -> None:
        result = codec.apply_contrast(rgb_image, 50)
        assert np.asarray(result).std() < np.asarray(rgb_image).std()


class TestEncodeJpeg:
    """Validate JPEG export."""

    def test_jpeg_signature(self, codec: PillowCodec, rgb_image: Image.Image) -> None:
        data = codec.encode_jpeg(rgb_image, 80)
        assert data[:2] == b"\xff\xd8"

    def test_roundtrip_size(self, codec: PillowCodec, rgb_image: Image.Image) -> None:
        data = codec.encode_jpeg(rgb_image, 80)
        assert Image.open(io.BytesIO(data)).size == (400, 200)

    def test_deterministic(self, codec: PillowCodec, rgb_image: Image.Image) -> None:
        assert codec.encode_jpeg(rgb_image, 75) == codec.encode_jpeg(rgb_image, 75)

    def test_quality_changes_output(self, codec: PillowCodec, rgb_image: Image.Image) -> None:
        assert len(codec.encode_jpeg(rgb_image, 10)) < len(codec.encode_jpeg(rgb_image, 95))
