"""
Test image header probing with real files written by Pillow.
"""

import pytest

from aspectsort.errors import DecodeError
from aspectsort.metadata import ImageMetadata, probe_image


class TestProbeImage:
    """Test dimension and orientation extraction."""

    def test_jpeg_with_orientation(self, make_image):
        path = make_image("tagged.jpg", 640, 360, orientation=6)

        metadata = probe_image(path)

        assert metadata.width == 640
        assert metadata.height == 360
        assert metadata.orientation == 6
        assert metadata.orientation_label == "6"
        assert metadata.format == "JPEG"
        assert metadata.has_exif

    def test_jpeg_without_exif(self, make_image):
        path = make_image("plain.jpg", 320, 240)

        metadata = probe_image(path)

        assert (metadata.width, metadata.height) == (320, 240)
        assert metadata.orientation is None
        assert metadata.orientation_label == "Unknown"
        assert not metadata.has_exif

    @pytest.mark.parametrize("name", ["image.png", "image.bmp", "image.tiff"])
    def test_other_formats(self, make_image, name):
        path = make_image(name, 200, 100)

        metadata = probe_image(path)

        assert (metadata.width, metadata.height) == (200, 100)
        assert metadata.orientation is None

    def test_corrupt_file_raises_decode_error(self, source_dir):
        path = source_dir / "broken.jpg"
        path.write_bytes(b"this is not a jpeg")

        with pytest.raises(DecodeError) as exc_info:
            probe_image(path)

        assert exc_info.value.path == path
        assert "broken.jpg" in str(exc_info.value)

    def test_missing_file_raises_decode_error(self, source_dir):
        with pytest.raises(DecodeError):
            probe_image(source_dir / "missing.jpg")

    def test_wrong_extension_still_decoded_by_content(self, make_image):
        path = make_image("actually_png.jpg", 100, 50, fmt="PNG")

        metadata = probe_image(path)

        assert metadata.format == "PNG"
        assert metadata.width == 100

    def test_exif_without_orientation_tag(self, make_image):
        path = make_image("camera.jpg", 640, 360, exif_tags={0x010F: "Canon"})

        metadata = probe_image(path)

        assert metadata.has_exif
        assert metadata.orientation is None
        assert metadata.orientation_label == "Unknown"

    def test_images_above_pillow_pixel_limit(self, make_image, monkeypatch):
        from PIL import Image

        path = make_image("panorama.jpg", 400, 300, orientation=1)
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)

        metadata = probe_image(path)

        assert (metadata.width, metadata.height) == (400, 300)
        assert metadata.orientation == 1
        assert Image.MAX_IMAGE_PIXELS == 1000

    def test_png_pixels_not_decoded(self, make_image, monkeypatch):
        path = make_image("plain.png", 200, 100)

        def fail_load(self):
            raise AssertionError("pixel data decoded")

        monkeypatch.setattr("PIL.PngImagePlugin.PngImageFile.load", fail_load)

        metadata = probe_image(path)

        assert (metadata.width, metadata.height) == (200, 100)
        assert not metadata.has_exif


class TestImageMetadata:
    """Test derived metadata properties."""

    def test_aspect_ratio(self, tmp_path):
        metadata = ImageMetadata(path=tmp_path / "x.jpg", width=3840, height=2160)
        assert metadata.aspect_ratio == pytest.approx(16 / 9)

    def test_is_immutable(self, tmp_path):
        metadata = ImageMetadata(path=tmp_path / "x.jpg", width=10, height=10)
        with pytest.raises(AttributeError):
            metadata.width = 20
