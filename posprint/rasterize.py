"""Conversion of images to packed 1-bit raster data for receipt printers."""

from __future__ import annotations

from typing import Protocol, Sequence

from PIL import Image

_LUM_R, _LUM_G, _LUM_B = 55, 182, 18
_MAX16 = 0xFFFF


class RasterTarget(Protocol):
    """Anything that can print packed raster data."""

    def raster(self, width: int, height: int, bytes_width: int, data: bytes) -> None:
        ...


def _to16(channel: int) -> int:
    return channel * 0x101


def lightness(color: Sequence[int]) -> float:
    """Return the perceived lightness (0.0 to 1.0) of an 8-bit RGB or RGBA colour.

    Colour channels are premultiplied by alpha, so fully transparent pixels
    are treated as black.
    """
    r, g, b, *rest = color
    alpha16 = _to16(rest[0]) if rest else _MAX16
    r16 = _to16(r) * alpha16 // _MAX16
    g16 = _to16(g) * alpha16 // _MAX16
    b16 = _to16(b) * alpha16 // _MAX16
    weighted = _LUM_R * r16 + _LUM_G * g16 + _LUM_B * b16
    return weighted / (_MAX16 * (_LUM_R + _LUM_G + _LUM_B))


class Converter:
    """Turns images into raster data no wider than the printer allows."""

    def __init__(self, max_width: int, threshold: float) -> None:
        self.max_width = max_width
        self.threshold = threshold

    def to_raster(self, image: Image.Image) -> tuple[bytes, int, int]:
        """Return ``(data, image_width, bytes_width)`` for ``image``.

        Images wider than ``max_width`` are truncated on the right. A bit is
        set for every pixel whose lightness reaches the threshold.
        """
        rgba = image.convert("RGBA")
        pixels = rgba.load()
        image_width = min(rgba.width, self.max_width)
        bytes_width = (image_width + 7) // 8
        data = bytearray(bytes_width * rgba.height)

        for y in range(rgba.height):
            line_start = y * bytes_width
            for x in range(image_width):
                if lightness(pixels[x, y]) >= self.threshold:
                    data[line_start + x // 8] |= 0x80 >> (x % 8)

        return bytes(data), image_width, bytes_width

    def print(self, image: Image.Image, target: RasterTarget) -> None:
        """Rasterize ``image`` and send it to ``target``."""
        data, image_width, bytes_width = self.to_raster(image)
        target.raster(image_width, image.height, bytes_width, data)