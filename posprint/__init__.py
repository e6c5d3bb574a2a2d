"""Drive ESC/POS receipt printers over any binary stream: text, barcodes, cuts and raster images."""

__version__ = "0.1.0"
__all__ = ["__version__"]