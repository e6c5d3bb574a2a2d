"""Command line tool that prints text or an image on an ESC/POS printer."""

from __future__ import annotations

import argparse
import contextlib
import logging
import socket
import sys
from typing import BinaryIO, Iterable, Iterator, Sequence

from PIL import Image

from .printer import Printer
from .rasterize import Converter

log = logging.getLogger(__name__)

_DEFAULT_PORT = 9100
_DEFAULT_TEXT = ("Hello World!",)


def print_text(printer: Printer, lines: Iterable[str]) -> None:
    """Initialise the printer, print each line, then cut and end output."""
    printer.init()
    for line in lines:
        printer.write(line)
        printer.linefeed()
    printer.cut()
    printer.end()


def print_image(
    printer: Printer,
    image_path: str,
    align: str,
    max_width: int,
    threshold: float,
    cut: bool,
) -> None:
    """Print the image at ``image_path`` as black and white raster graphics."""
    with Image.open(image_path) as image:
        image.load()
        log.info("Loaded image, format: %s", image.format)
        printer.init()
        printer.set_align(align)
        Converter(max_width, threshold).print(image, printer)
    if cut:
        printer.cut()
    printer.end()


@contextlib.contextmanager
def _open_stream(args: argparse.Namespace) -> Iterator[BinaryIO]:
    if args.device is not None:
        with open(args.device, "wb") as stream:
            yield stream
        return
    with socket.create_connection((args.host, args.port), timeout=args.timeout) as sock:
        with sock.makefile("rwb", buffering=0) as stream:
            yield stream


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="posprint",
        description="Print text or an image on an ESC/POS receipt printer.",
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--host", help="network printer host name or address")
    target.add_argument("-p", "--device", help="printer device file or output file")
    parser.add_argument("--port", type=int, default=_DEFAULT_PORT, help="network printer port")
    parser.add_argument("--timeout", type=float, default=10.0, help="connection timeout in seconds")
    parser.add_argument("-i", "--image", help="input image to print instead of text")
    parser.add_argument("-t", "--threshold", type=float, default=0.5, help="black/white threshold")
    parser.add_argument(
        "-a", "--align", default="center", choices=("left", "center", "right"), help="image alignment"
    )
    parser.add_argument("-c", "--cut", action="store_true", help="cut after printing an image")
    parser.add_argument(
        "--printer-max-width", dest="max_width", type=int, default=512,
        help="printer max width in pixels",
    )
    parser.add_argument("text", nargs="*", help="lines of text to print")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line tool and return the exit status."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    try:
        with _open_stream(args) as stream:
            printer = Printer(stream)
            if args.image is not None:
                print_image(
                    printer, args.image, args.align, args.max_width, args.threshold, args.cut
                )
            else:
                print_text(printer, args.text or _DEFAULT_TEXT)
    except OSError as err:
        print(f"posprint: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())