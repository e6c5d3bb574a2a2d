[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "posprint"
version = "0.1.0"
description = "Drive ESC/POS receipt printers: text styling, barcodes, cuts, cash drawer and raster images"
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = ["escpos", "esc/pos", "receipt", "thermal printer", "pos", "raster"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Printing",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
posprint = "posprint.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["posprint"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
