# gbatools

Command-line tools and a small Python library for preparing Game Boy Advance
assets. gbatools converts between PNG images and raw tile data, converts
palettes and bitmap fonts, handles the BIOS LZ77 (type 0x10) and run-length
(type 0x30) compression formats, turns mono 8-bit AIFF samples into the
engine's PCM sample format and back, and dumps binary files as C arrays.

The package is pure Python and has no third-party dependencies. PNG reading
and writing use only the standard library (`zlib` and `struct`).

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Command-line tools

Three commands are installed: `gbagfx`, `aif2pcm` and `bin2c`. Each prints
its error message to standard error and exits with status 1 when something
goes wrong, and exits with status 0 otherwise.

### gbagfx

```
gbagfx INPUT_PATH OUTPUT_PATH [options...]
```

The file extensions of the two paths decide which conversion runs. The first
matching row wins:

| Input        | Output       | Conversion                                   |
|--------------|--------------|----------------------------------------------|
| `.1bpp` `.4bpp` `.8bpp` | `.png` | tile data to indexed or greyscale PNG |
| `.png`       | `.1bpp` `.4bpp` `.8bpp` | PNG to tile data              |
| `.png`       | `.gbapal`    | PNG palette to GBA palette                   |
| `.gbapal`    | `.pal`       | GBA palette to JASC-PAL                      |
| `.pal`       | `.gbapal`    | JASC-PAL to GBA palette                      |
| `.latfont`   | `.png`       | Latin font to PNG                            |
| `.png`       | `.latfont`   | PNG to Latin font                            |
| `.hwjpnfont` | `.png`       | half-width Japanese font to PNG              |
| `.png`       | `.hwjpnfont` | PNG to half-width Japanese font              |
| `.fwjpnfont` | `.png`       | full-width Japanese font to PNG              |
| `.png`       | `.fwjpnfont` | PNG to full-width Japanese font              |
| any          | `.lz`        | LZ77 compress                                |
| `.lz`        | any          | LZ77 decompress                              |
| any          | `.rl`        | run-length compress                          |
| `.rl`        | any          | run-length decompress                        |

Both paths must have an extension. The bit depth of tile data is taken from
the first character of the tile file's extension.

Options for tiles to PNG:

- `-palette FILE`: use a `.gbapal` palette and write an indexed PNG. Without
  it, the image is written as greyscale with its colours inverted.
- `-object`: with `-palette`, mark palette index 0 as transparent.
- `-width N`: the image width in tiles. The default is 1; it is raised to the
  metatile width if that is larger.
- `-mwidth N`, `-mheight N`: the metatile size in tiles. The default is 1×1.

Options for PNG to tiles:

- `-num_tiles N`: the number of tiles to write. By default every tile in the
  image is written.
- `-mwidth N`, `-mheight N`: the metatile size in tiles.

Option for JASC-PAL to GBA palette:

- `-num_colors N`: the number of colours to write. The palette is cut short,
  or padded with black, to that length.

Option for LZ compression:

- `-overflow N`: append N zero bytes before compressing, but keep the original
  size in the header. This reproduces tilesets that overflow their buffer
  when they are decompressed.

Examples:

```
gbagfx sprite.png sprite.4bpp -mwidth 2 -mheight 2
gbagfx sprite.4bpp sprite.png -palette sprite.gbapal -width 4 -object
gbagfx colors.pal colors.gbapal
gbagfx sprite.4bpp sprite.4bpp.lz
```

### aif2pcm

```
aif2pcm sample.aif [sample.bin] [--compress]
aif2pcm sample.bin [sample.aif]
```

An `.aif` or `.aiff` input must be mono and 8-bit. It is converted to a `.bin`
sample that starts with a 16-byte little-endian header: flags, pitch (sample
rate × 1024), loop start and the number of samples minus one. With
`--compress`, the sample data is delta-encoded. A `.bin` input is converted
back to AIFF with `START`/`END` loop markers (when the loop flag is set) and an
instrument chunk whose base note is 60. If no output path is given, the input
name is used with its extension replaced. `--compress` is only recognised
after an explicit output path.

### bin2c

```
bin2c INPUT_FILE VAR_NAME [-col N] [-pad N] [-size 1|2|4] [-signed] [-static] [-decimal]
```

Prints a C array definition of the file's contents to standard output. Each
element is `-size` bytes wide and is read as little-endian; `-col` sets how
many elements go on a line and `-pad` the field width of each value. Elements
are written in hexadecimal unless `-decimal` or `-signed` is given; `-signed`
also makes the element type `sN` instead of `uN`. The file size must be a
multiple of the element size.

```
bin2c table.bin gTable -size 2 -col 8 > table.h
```

## Library use

The same conversions can be called from Python.

Compression works on bytes:

```python
from gbatools.lz import lz_compress, lz_decompress
from gbatools.rl import rl_compress, rl_decompress

packed = lz_compress(b"\x00" * 64)
assert lz_decompress(packed) == b"\x00" * 64

packed = rl_compress(b"abcabc" + b"z" * 20)
assert rl_decompress(packed) == b"abcabc" + b"z" * 20
```

Palettes are `gbatools.gfx.Palette` objects holding a list of
`gbatools.gfx.Color` values:

```python
from pathlib import Path

from gbatools.gfx import decode_gba_palette, encode_gba_palette
from gbatools.jasc_pal import parse_jasc_palette, format_jasc_palette

palette = parse_jasc_palette(Path("colors.pal").read_bytes())
gba_bytes = encode_gba_palette(palette)
print(format_jasc_palette(decode_gba_palette(gba_bytes)).decode("ascii"))
```

`read_gba_palette`, `write_gba_palette`, `read_jasc_palette` and
`write_jasc_palette` do the same with files.

Tiles and images are `gbatools.gfx.Image` objects with packed, row-major
pixels:

```python
from gbatools.gfx import read_image, write_image
from gbatools.convert_png import write_png, read_png

image = read_image("sprite.4bpp", 4, 4, 1, 1, True)
write_png("sprite.png", image)

image = read_png("sprite.png", 4)
write_image("sprite.4bpp", image, 0, 4, 1, 1, not image.has_palette)
```

`tiles_to_pixels` and `pixels_to_tiles` do the tile layout on bytes in memory.
`gbatools.font` reads and writes the three font formats as 2bpp images, and
`read_png_palette` returns the palette of an indexed PNG.

Audio samples:

```python
from gbatools.aif2pcm import read_aif, aif_to_pcm, pcm_to_aif
from gbatools.delta import delta_compress, delta_decompress
from gbatools.extended import read_extended, write_extended

assert read_extended(write_extended(13379.0)) == 13379.0
```

`gbatools.bin2c.format_c_array` returns the C source as a string rather than
printing it.

The graphics and compression functions report malformed input by raising
`gbatools.util.GfxError`. The AIFF, sample and C-array functions raise
`ValueError`.

## Limitations

- Only greyscale and indexed PNG images can be read; RGB and RGBA images are
  rejected. PNGs are always written non-interlaced and unfiltered.
- Tile data must be 1, 4 or 8 bits per pixel.
- AIFF input must be a single channel of 8-bit samples.
- The 80-bit float writer stores magnitudes in [0.5, 1) with the maximum
  exponent, so such sample rates do not survive a round trip.