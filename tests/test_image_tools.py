from io import BytesIO
from unittest.mock import patch

import pytest
from PIL import Image

from conftest import make_image_bytes
from utils.errors import InvalidImageError
from utils.image_tools import build_white_mask, to_editable_source


def open_png(data: bytes) -> Image.Image:
    img = Image.open(BytesIO(data))
    assert img.format == "PNG"
    return img


def test_jpeg_becomes_rgba_png():
    png_bytes, width, height = to_editable_source(make_image_bytes((64, 48), "RGB", "JPEG"))

    img = open_png(png_bytes)
    assert img.mode == "RGBA"
    assert img.size == (64, 48)
    assert (width, height) == (64, 48)


def test_existing_alpha_is_kept():
    png_bytes, _, _ = to_editable_source(make_image_bytes((10, 10), "RGBA", "PNG"))

    img = open_png(png_bytes)
    assert img.mode == "RGBA"
    assert img.getpixel((5, 5))[3] == 128


def test_wide_image_is_downscaled_keeping_aspect_ratio():
    png_bytes, width, height = to_editable_source(make_image_bytes((4096, 1024), "RGB", "PNG"))

    img = open_png(png_bytes)
    assert img.size == (2048, 512)
    assert (width, height) == (2048, 512)


def test_custom_width_cap():
    _, width, height = to_editable_source(make_image_bytes((300, 200), "RGB", "PNG"), max_width=150)
    assert (width, height) == (150, 100)


def test_same_input_gives_same_dimensions():
    raw = make_image_bytes((3000, 1999), "RGB", "JPEG")

    first = to_editable_source(raw)
    second = to_editable_source(raw)

    assert first[1:] == second[1:]
    assert first[1] == 2048
    assert first[2] == round(1999 * 2048 / 3000)


def test_undecodable_bytes():
    with pytest.raises(InvalidImageError):
        to_editable_source(b"<html>not an image</html>")


def test_broken_exif_is_an_invalid_image():
    raw = make_image_bytes((20, 20), "RGB", "JPEG")

    with patch("utils.image_tools.ImageOps.exif_transpose", side_effect=SyntaxError("corrupt EXIF")):
        with pytest.raises(InvalidImageError):
            to_editable_source(raw)


def test_white_mask():
    img = open_png(build_white_mask(30, 20))

    assert img.size == (30, 20)
    assert img.mode == "RGBA"
    # Every channel is constant 255: white and fully opaque
    assert img.getextrema() == ((255, 255), (255, 255), (255, 255), (255, 255))
