# posprint

Send ESC/POS commands to receipt printers from Python. `posprint` writes to any
binary stream you give it (a TCP socket file, a line-printer device file or an
in-memory buffer). It handles text styling, alignment, font sizes, feeds, cuts,
barcodes, the cash drawer pulse and raster images.

## Installation

```
pip install posprint
```

## Printing text

`posprint.printer.Printer` wraps a binary stream. Used as a context manager it
closes the stream on exit.

```python
import socket
from posprint.printer import Printer

sock = socket.create_connection(("192.0.2.10", 9100))
with Printer(sock.makefile("rwb", buffering=0)) as printer:
    printer.init()
    printer.write("Hello\n")
    printer.set_reverse(1)
    printer.write("Inverted text")
    printer.linefeed()
    printer.cut()
    printer.end()
sock.close()
```

A device file works the same way:

```python
with Printer(open("/dev/usb/lp0", "r+b", buffering=0)) as printer:
    printer.init()
    printer.write("Receipt\n")
    printer.cut()
```

`write` takes `str` (encoded as UTF-8) or `bytes`; `write_raw` takes bytes.
Other commands include `set_font("A" | "B" | "C")`, `set_font_size(width,
height)` (1 to 8 each), `set_align("left" | "center" | "right")`, `set_lang`,
`set_underline`, `set_emphasize`, `set_upsidedown`, `set_rotate`,
`set_smooth`, `send_move_x`, `send_move_y`, `formfeed`, `formfeed_n`,
`cut_partial`, `cash`, `pulse` and `barcode(text, format)`.

`read_status(n)` sends a status request and returns the byte the printer
answers with; it raises `EOFError` if nothing comes back, so the stream must be
readable.

### Nodes with parameters

`Printer.write_node` accepts a node name (`text`, `feed`, `cut` or `pulse`)
with a mapping of string parameters, which suits driving the printer from
templates. Other node names are ignored.

```python
printer.write_node("text", {"align": "center", "em": "true", "dw": "1"}, "TOTAL &amp; TAX")
printer.write_node("feed", {"line": "2"}, "")
printer.write_node("cut", {"type": "feed"}, "")
```

Text parameters are `align`, `lang`, `font` (such as `"font_b"`), `smooth`,
`em`, `ul`, `reverse`, `rotate`, `dw`, `dh`, `width`, `height`, `x` and `y`.
Entities such as `&lt;`, `&amp;` and `&#10;` in the text are decoded before
printing (`posprint.printer.text_replace`). Invalid fonts, alignments,
languages, sizes or numbers raise `ValueError`.

A `feed` node feeds `line` lines and/or `unit` dots, then resets every style
setting and sends the reset state to the printer.

## Printing images

`posprint.rasterize.Converter` turns a Pillow image into packed 1-bit raster
data; pixels whose lightness reaches the threshold set a bit. Images wider than
`max_width` are cut off on the right. `Printer.raster` sends the data in bands
of at most 1662 lines.

```python
from PIL import Image
from posprint.rasterize import Converter

converter = Converter(max_width=512, threshold=0.5)
with Image.open("logo.png") as image:
    converter.print(image, printer)
```

## Command line

```
posprint --host 192.0.2.10 "Hello World!" "Second line"
posprint --device /dev/usb/lp0 --image logo.png --align center --cut
```

One of `--host` (with `--port`, default 9100, and `--timeout`, default 10
seconds) or `-p/--device` is required. Without `--image`, each positional
argument is printed as a line (default `Hello World!`), followed by a cut.
With `-i/--image`, the image is printed using `-a/--align`, `-t/--threshold`
(default 0.5) and `--printer-max-width` (default 512); `-c/--cut` cuts
afterwards. Connection and file errors are reported and exit with status 1.

## What it does not do

`posprint` only writes to streams: it does not find printers, talk to an
operating-system print queue or spooler by printer name, or open USB devices
other than through a device file. `write_node` has no image node; print images
with `Converter` instead.