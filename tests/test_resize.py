"""
Pillow resize tests
===================
Output geometry for both resize modes, JPEG output and error surfacing.
"""

import pytest
from PIL import Image

from conftest import make_jpeg
from thumbnail.pipeline.params import Dimensions, Ratio
from thumbnail.pipeline.resize import (
    get_resample_filter,
    make_resizer,
    resize_image,
    target_size,
)


class TestTargetSize:

    def test_ratio(self):
        assert target_size((1000, 500), Ratio(0.3)) == (300, 150)

    def test_ratio_upscale(self):
        assert target_size((10, 20), Ratio(2.5)) == (25, 50)

    def test_ratio_never_below_one_pixel(self):
        assert target_size((10, 3), Ratio(0.01)) == (1, 1)

    def test_dimensions_fit_inside_box(self):
        assert target_size((1000, 500), Dimensions(200, 200)) == (200, 100)

    def test_dimensions_fit_portrait(self):
        assert target_size((500, 1000), Dimensions(200, 200)) == (100, 200)

    def test_dimensions_can_enlarge(self):
        assert target_size((100, 50), Dimensions(400, 400)) == (400, 200)

    def test_dimensions_exact_without_aspect(self):
        assert target_size((1000, 500), Dimensions(64, 64), keep_aspect=False) == (64, 64)


class TestResizeImage:

    def test_writes_resized_jpeg(self, tmp_path):
        src = make_jpeg(tmp_path / "in.jpg", size=(400, 200))
        dst = tmp_path / "out.jpg"

        old, new = resize_image(src, dst, Ratio(0.5))

        assert (old, new) == ((400, 200), (200, 100))
        with Image.open(dst) as im:
            assert im.format == "JPEG"
            assert im.size == (200, 100)

    def test_dimensions_mode(self, tmp_path):
        src = make_jpeg(tmp_path / "in.jpg", size=(400, 200))
        dst = tmp_path / "out.jpg"

        resize_image(src, dst, Dimensions(100, 100))

        with Image.open(dst) as im:
            assert im.size == (100, 50)

    def test_keeps_uppercase_name(self, tmp_path):
        src = make_jpeg(tmp_path / "IMG_0001.JPEG", size=(40, 40))
        dst = tmp_path / "copy" / src.name
        dst.parent.mkdir()

        resize_image(src, dst, Ratio(0.5))

        assert dst.is_file()

    def test_not_an_image_raises_oserror(self, tmp_path):
        src = tmp_path / "fake.jpg"
        src.write_text("definitely not a jpeg")

        with pytest.raises(OSError):
            resize_image(src, tmp_path / "out.jpg", Ratio(0.5))

    def test_missing_parent_raises_oserror(self, tmp_path):
        src = make_jpeg(tmp_path / "in.jpg")

        with pytest.raises(OSError):
            resize_image(src, tmp_path / "missing" / "out.jpg", Ratio(0.5))

    def test_exif_orientation_applied(self, tmp_path):
        src = tmp_path / "rotated.jpg"
        exif = Image.Exif()
        exif[0x0112] = 6  # rotate 90 CW on display
        Image.new("RGB", (40, 20)).save(src, "JPEG", exif=exif.tobytes())
        dst = tmp_path / "out.jpg"

        resize_image(src, dst, Ratio(1.0))

        with Image.open(dst) as im:
            assert im.size == (20, 40)
            assert im.getexif().get(0x0112) is None


class TestMakeResizer:

    def test_uses_settings(self, tmp_path):
        resize = make_resizer({"resize": {"quality": 50, "keep_aspect": False}})
        src = make_jpeg(tmp_path / "in.jpg", size=(400, 200))
        dst = tmp_path / "out.jpg"

        resize(src, dst, Dimensions(30, 30))

        with Image.open(dst) as im:
            assert im.size == (30, 30)

    def test_defaults_when_settings_empty(self, tmp_path):
        resize = make_resizer({})
        src = make_jpeg(tmp_path / "in.jpg", size=(40, 20))
        dst = tmp_path / "out.jpg"
        resize(src, dst, Ratio(0.5))
        assert dst.is_file()

    @pytest.mark.parametrize("quality", [0, 96, -5])
    def test_bad_quality(self, quality):
        with pytest.raises(ValueError):
            make_resizer({"resize": {"quality": quality}})

    def test_bad_resample(self):
        with pytest.raises(ValueError):
            make_resizer({"resize": {"resample": "sharpest"}})


def test_resample_names_case_insensitive():
    assert get_resample_filter("LANCZOS") == Image.LANCZOS


class TestBrokenInputs:
    """Pillow failures outside OSError still come out as OSError."""

    def test_corrupt_exif_raises_oserror(self, tmp_path):
        src = tmp_path / "bad_exif.jpg"
        Image.new("RGB", (40, 20)).save(src, "JPEG", exif=b"Exif\x00\x00garbage-not-tiff")

        with pytest.raises(OSError):
            resize_image(src, tmp_path / "out.jpg", Ratio(0.5))

    def test_decompression_bomb_raises_oserror(self, tmp_path, monkeypatch):
        src = make_jpeg(tmp_path / "huge.jpg", size=(400, 200))
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

        with pytest.raises(OSError):
            resize_image(src, tmp_path / "out.jpg", Ratio(0.5))
