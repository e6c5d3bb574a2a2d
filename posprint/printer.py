"""ESC/POS command writer for receipt printers."""

from __future__ import annotations

import logging
import re
from typing import BinaryIO, Mapping

DLE = 0x10
EOT = 0x04
GS = 0x1D

GS8L_MAX_Y = 1662

_TEXT_REPLACEMENTS = (
    ("&#9;", "\t"),
    ("&#x9;", "\t"),
    ("&#10;", "\n"),
    ("&#xA;", "\n"),
    ("&apos;", "'"),
    ("&quot;", '"'),
    ("&gt;", ">"),
    ("&lt;", "<"),
    # ampersand must be last to avoid double decoding
    ("&amp;", "&"),
)

_FONTS = {"A": 0, "B": 1, "C": 2}
_ALIGNMENTS = {"left": 0, "center": 1, "right": 2}
_LANGUAGES = {
    "en": 0,
    "fr": 1,
    "de": 2,
    "uk": 3,
    "da": 4,
    "sv": 5,
    "it": 6,
    "es": 7,
    "ja": 8,
    "no": 9,
}
_BARCODE_CODES = {0: b"\x00", 1: b"\x01", 2: b"\x02", 3: b"\x03", 4: b"\x04", 73: b"\x49"}

_INTEGER = re.compile(r"[+-]?[0-9]+")


def text_replace(data: str) -> str:
    """Decode the XML entities and character references used in print markup."""
    for entity, replacement in _TEXT_REPLACEMENTS:
        data = data.replace(entity, replacement)
    return data


def _char(n: int) -> bytes:
    """Encode a number as a single character, UTF-8 encoded."""
    if 0 <= n <= 0x10FFFF and not 0xD800 <= n <= 0xDFFF:
        return chr(n).encode("utf-8")
    return "\ufffd".encode("utf-8")


def _is_true(params: Mapping[str, str], key: str) -> bool:
    return params.get(key) in ("true", "1")


def _parse_int(value: str, what: str) -> int:
    if not _INTEGER.fullmatch(value):
        raise ValueError(f"Invalid {what}: {value}")
    return int(value)


class Printer:
    """Sends ESC/POS commands to a binary stream and tracks text style state."""

    def __init__(self, stream: BinaryIO, logger: logging.Logger | None = None) -> None:
        self.stream = stream
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self._reset()

    def _reset(self) -> None:
        self.width = 1
        self.height = 1
        self.underline = 0
        self.emphasize = 0
        self.upsidedown = 0
        self.rotate = 0
        self.reverse = 0
        self.smooth = 0

    def __enter__(self) -> "Printer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def write_raw(self, data: bytes) -> None:
        """Write raw bytes to the printer; empty data is ignored."""
        if data:
            self.stream.write(bytes(data))

    def read_raw(self, size: int) -> bytes:
        """Read up to ``size`` bytes from the printer."""
        return self.stream.read(size)

    def write(self, data: str | bytes) -> None:
        """Write text (UTF-8 encoded) or bytes to the printer."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        self.write_raw(data)

    def init(self) -> None:
        self._reset()
        self.write(b"\x1b@")

    def end(self) -> None:
        self.write(b"\xfa")

    def close(self) -> None:
        self.stream.close()

    def cut(self) -> None:
        self.write(b"\x1dVA0")

    def cut_partial(self) -> None:
        self.write_raw(bytes([GS, 0x56, 1]))

    def cash(self) -> None:
        self.write(b"\x1b\x70\x00\x0a\xff")

    def linefeed(self) -> None:
        self.write(b"\n")

    def formfeed_n(self, n: int) -> None:
        self.write(b"\x1bd" + _char(n))

    def formfeed(self) -> None:
        self.formfeed_n(1)

    def set_font(self, font: str) -> None:
        if font not in _FONTS:
            raise ValueError(f"Invalid font: '{font}'")
        self.write(b"\x1bM" + _char(_FONTS[font]))

    def send_font_size(self) -> None:
        size = (((self.width - 1) << 4) | (self.height - 1)) & 0xFF
        self.write(b"\x1d!" + _char(size))

    def set_font_size(self, width: int, height: int) -> None:
        if not (0 < width <= 8 and 0 < height <= 8):
            raise ValueError(f"Invalid font size passed: {width} x {height}")
        self.width = width
        self.height = height
        self.send_font_size()

    def send_underline(self) -> None:
        self.write(b"\x1b-" + _char(self.underline))

    def send_emphasize(self) -> None:
        self.write(b"\x1bG" + _char(self.emphasize))

    def send_upsidedown(self) -> None:
        self.write(b"\x1b{" + _char(self.upsidedown))

    def send_rotate(self) -> None:
        self.write(b"\x1bR" + _char(self.rotate))

    def send_reverse(self) -> None:
        self.write(b"\x1dB" + _char(self.reverse))

    def send_smooth(self) -> None:
        self.write(b"\x1db" + _char(self.smooth))

    def send_move_x(self, x: int) -> None:
        x &= 0xFFFF
        self.write(bytes([0x1B, 0x24, x % 256, x // 256]))

    def send_move_y(self, y: int) -> None:
        y &= 0xFFFF
        self.write(bytes([0x1D, 0x24, y % 256, y // 256]))

    def set_underline(self, value: int) -> None:
        self.underline = value & 0xFF
        self.send_underline()

    def set_emphasize(self, value: int) -> None:
        self.emphasize = value & 0xFF
        self.send_emphasize()

    def set_upsidedown(self, value: int) -> None:
        self.upsidedown = value & 0xFF
        self.send_upsidedown()

    def set_rotate(self, value: int) -> None:
        self.rotate = value & 0xFF
        self.send_rotate()

    def set_reverse(self, value: int) -> None:
        self.reverse = value & 0xFF
        self.send_reverse()

    def set_smooth(self, value: int) -> None:
        self.smooth = value & 0xFF
        self.send_smooth()

    def pulse(self) -> None:
        """Open the cash drawer."""
        self.write(b"\x1bp\x02")

    def set_align(self, align: str) -> None:
        if align not in _ALIGNMENTS:
            raise ValueError(f"Invalid alignment: {align}")
        self.write(b"\x1ba" + _char(_ALIGNMENTS[align]))

    def set_lang(self, lang: str) -> None:
        if lang not in _LANGUAGES:
            raise ValueError(f"Invalid language: {lang}")
        self.write(b"\x1bR" + _char(_LANGUAGES[lang]))

    def text(self, params: Mapping[str, str], data: str) -> None:
        """Apply the style parameters, then print a block of text."""
        if "align" in params:
            self.set_align(params["align"])
        if "lang" in params:
            self.set_lang(params["lang"])
        if _is_true(params, "smooth"):
            self.set_smooth(1)
        if _is_true(params, "em"):
            self.set_emphasize(1)
        if _is_true(params, "ul"):
            self.set_underline(1)
        if _is_true(params, "reverse"):
            self.set_reverse(1)
        if _is_true(params, "rotate"):
            self.set_rotate(1)
        if "font" in params:
            self.set_font(params["font"][5:6].upper())
        if _is_true(params, "dw"):
            self.set_font_size(2, self.height)
        if _is_true(params, "dh"):
            self.set_font_size(self.width, 2)
        if "width" in params:
            width = _parse_int(params["width"], "font width")
            self.set_font_size(width & 0xFF, self.height)
        if "height" in params:
            height = _parse_int(params["height"], "font height")
            self.set_font_size(self.width, height & 0xFF)
        if "x" in params:
            self.send_move_x(_parse_int(params["x"], "x param"))
        if "y" in params:
            self.send_move_y(_parse_int(params["y"], "y param"))

        data = text_replace(data)
        if data:
            self.write(data)

    def feed(self, params: Mapping[str, str]) -> None:
        """Feed paper, then reset and resend every style setting."""
        if "line" in params:
            self.formfeed_n(_parse_int(params["line"], "line number"))
        if "unit" in params:
            self.send_move_y(_parse_int(params["unit"], "unit number"))

        self.linefeed()
        self._reset()

        self.send_emphasize()
        self.send_rotate()
        self.send_smooth()
        self.send_reverse()
        self.send_underline()
        self.send_upsidedown()
        self.send_font_size()
        self.send_underline()

    def feed_and_cut(self, params: Mapping[str, str]) -> None:
        if params.get("type") == "feed":
            self.formfeed()
        self.cut()

    def barcode(self, barcode: str, format: int) -> None:
        """Print a centred barcode of the given format, followed by its text."""
        code = _BARCODE_CODES.get(format, b"")
        encoded = barcode.encode("utf-8")

        self._reset()
        self.set_align("center")

        if format > 69:
            self.write(b"\x1dk" + code + str(len(encoded)).encode("ascii") + encoded)
        elif format < 69:
            self.write(b"\x1dk" + code + encoded + b"\x00")
        self.write(encoded)

    def write_node(self, name: str, params: Mapping[str, str], data: str) -> None:
        """Dispatch a named markup node; unknown names are ignored."""
        suffix = ""
        if data:
            shown = f"{data[:40]} ..." if len(data) > 40 else data
            suffix = f" => '{shown}'"
        self.logger.info("Write: %s => %s%s", name, dict(params), suffix)

        if name == "text":
            self.text(params, data)
        elif name == "feed":
            self.feed(params)
        elif name == "cut":
            self.feed_and_cut(params)
        elif name == "pulse":
            self.pulse()

    def read_status(self, n: int) -> int:
        """Request status ``n`` and return the byte the printer answers with."""
        self.write_raw(bytes([DLE, EOT, n & 0xFF]))
        data = self.read_raw(1)
        if not data:
            raise EOFError("printer returned no status byte")
        return data[0]

    def raster(self, width: int, height: int, bytes_width: int, data: bytes) -> None:
        """Print packed 1-bit raster data in bands of at most GS8L_MAX_Y lines."""
        flush = bytes([0x1D, 0x28, 0x4C, 0x02, 0x00, 0x30, 0x32])
        line = 0
        while line < height:
            n_lines = min(GS8L_MAX_Y, height - line)
            p = 10 + n_lines * bytes_width
            store = bytes(
                [
                    0x1D, 0x38, 0x4C,
                    p & 0xFF, (p >> 8) & 0xFF, (p >> 16) & 0xFF, (p >> 24) & 0xFF,
                    0x30, 0x70, 0x30,
                    0x01, 0x01,
                    0x31,
                    width & 0xFF, (width >> 8) & 0xFF,
                    n_lines & 0xFF, (n_lines >> 8) & 0xFF,
                ]
            )
            self.write_raw(store)
            self.write_raw(data[line * bytes_width:(line + n_lines) * bytes_width])
            self.write_raw(flush)
            line += n_lines