[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gbatools"
version = "0.1.0"
description = "Asset conversion tools for Game Boy Advance projects: tiles, palettes, fonts, LZ/RL compression, AIFF samples and C arrays."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "gba",
    "game boy advance",
    "tiles",
    "palette",
    "png",
    "lz77",
    "run-length",
    "aiff",
    "pcm",
    "bin2c",
]
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
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
    "Topic :: Multimedia :: Sound/Audio :: Conversion",
    "Topic :: Software Development :: Build Tools",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gbagfx = "gbatools.gbagfx:main"
bin2c = "gbatools.bin2c:main"
aif2pcm = "gbatools.aif2pcm:main"

[tool.hatch.build.targets.wheel]
packages = ["gbatools"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
