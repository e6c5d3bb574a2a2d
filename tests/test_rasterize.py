import io

import pytest
from PIL import Image

from posprint.printer import Printer
from posprint.rasterize import Converter, lightness


class _Recorder:
    def __init__(self):
        self.calls = []

    def raster(self, width, height, bytes_width, data):
        self.calls.append((width, height, bytes_width, data))


def test_lightness_extremes():
    assert lightness((255, 255, 255, 255)) == 1.0
    assert lightness((0, 0, 0, 255)) == 0.0


def test_lightness_without_alpha_is_opaque():
    assert lightness((255, 255, 255)) == lightness((255, 255, 255, 255))


def test_lightness_transparent_is_dark():
    assert lightness((255, 255, 255, 0)) == 0.0


def test_lightness_green_weighs_most():
    assert lightness((0, 255, 0)) > lightness((255, 0, 0)) > lightness((0, 0, 255))


@pytest.mark.parametrize("size", [(1, 1), (7, 3), (8, 2), (9, 4), (17, 5)])
def test_raster_length_invariant(size):
    image = Image.new("RGB", size, (255, 255, 255))
    data, width, bytes_width = Converter(512, 0.5).to_raster(image)
    assert width == size[0]
    assert bytes_width == (size[0] + 7) // 8
    assert len(data) == bytes_width * size[1]


def test_white_byte_fully_set():
    image = Image.new("RGB", (8, 3), (255, 255, 255))
    data, _, _ = Converter(512, 0.5).to_raster(image)
    assert data == b"\xff" * 3


def test_black_image_is_all_zero():
    image = Image.new("RGB", (12, 2), (0, 0, 0))
    data, _, _ = Converter(512, 0.5).to_raster(image)
    assert set(data) == {0}


def test_first_pixel_sets_high_bit():
    image = Image.new("RGB", (8, 1), (0, 0, 0))
    image.putpixel((0, 0), (255, 255, 255))
    data, _, _ = Converter(512, 0.5).to_raster(image)
    assert data[0] == 0x80


def test_truncates_to_max_width():
    image = Image.new("L", (40, 2), 255)
    data, width, bytes_width = Converter(16, 0.5).to_raster(image)
    assert width == 16
    assert bytes_width == 2
    assert len(data) == 4


def test_grayscale_matches_rgb():
    gray = Image.new("L", (10, 3), 200)
    rgb = Image.new("RGB", (10, 3), (200, 200, 200))
    converter = Converter(512, 0.5)
    assert converter.to_raster(gray) == converter.to_raster(rgb)


def test_print_passes_dimensions_to_target():
    image = Image.new("RGB", (20, 6), (255, 255, 255))
    converter = Converter(512, 0.5)
    target = _Recorder()
    converter.print(image, target)
    data, width, bytes_width = converter.to_raster(image)
    assert target.calls == [(width, 6, bytes_width, data)]


def test_print_to_printer_emits_store_and_flush():
    image = Image.new("RGB", (8, 2), (255, 255, 255))
    out = io.BytesIO()
    Converter(512, 0.5).print(image, Printer(out))
    written = out.getvalue()
    assert written.startswith(b"\x1d\x38\x4c")
    assert written.endswith(b"\x1d\x28\x4c\x02\x00\x30\x32")
    assert b"\xff\xff" in written