"""GBA 2bpp font sheets (Latin, half-width and full-width Japanese)."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

from .gfx import Color, Image, Palette
from .util import GfxError, PathType, read_whole_file, write_whole_file

FONT_PALETTE = (
    (0x90, 0xC8, 0xFF),  # background: saturated blue that contrasts with the shadow
    (0x38, 0x38, 0x38),  # foreground: dark grey
    (0xD8, 0xD8, 0xD8),  # shadow: light grey
    (0xFF, 0xFF, 0xFF),  # box: white
)

_GLYPHS_PER_ROW = 16
_GLYPH_ROW_PIXELS = 16

Layout = Callable[[int], Iterator[tuple[int, int]]]


def _latin_layout(num_rows: int) -> Iterator[tuple[int, int]]:
    """Yield (file offset, image offset) of each two-byte glyph line."""
    file_offset = 0
    for row in range(num_rows):
        for column in range(16):
            for tile in range(4):
                x_bytes = (column * 16 + (tile & 1) * 8) // 4
                for line in range(8):
                    y = row * 16 + (tile >> 1) * 8 + line
                    yield file_offset, y * 64 + x_bytes
                    file_offset += 2


def _halfwidth_layout(num_rows: int) -> Iterator[tuple[int, int]]:
    """Yield (file offset, image offset) of each two-byte glyph line."""
    for row in range(num_rows):
        for column in range(16):
            glyph = row * 16 + column
            for tile in range(2):
                base = 512 * (glyph >> 4) + 16 * (glyph & 0xF) + 256 * tile
                x_bytes = (column * 8) // 4
                for line in range(8):
                    y = row * 16 + tile * 8 + line
                    yield base + 2 * line, y * 32 + x_bytes


def _fullwidth_layout(num_rows: int) -> Iterator[tuple[int, int]]:
    """Yield (file offset, image offset) of each two-byte glyph line."""
    for row in range(num_rows):
        for column in range(16):
            glyph = row * 16 + column
            for tile in range(4):
                base = (
                    512 * (glyph >> 3)
                    + 32 * (glyph & 7)
                    + 256 * (tile >> 1)
                    + 16 * (tile & 1)
                )
                x_bytes = (column * 16 + (tile & 1) * 8) // 4
                for line in range(8):
                    y = row * 16 + (tile >> 1) * 8 + line
                    yield base + 2 * line, y * 64 + x_bytes


@dataclass(frozen=True)
class _FontFormat:
    width: int
    layout: Layout

    @property
    def bytes_per_pixel_row(self) -> int:
        return self.width // 4

    def size_for_rows(self, num_rows: int) -> int:
        return num_rows * _GLYPH_ROW_PIXELS * self.bytes_per_pixel_row


_LATIN = _FontFormat(256, _latin_layout)
_HALFWIDTH = _FontFormat(128, _halfwidth_layout)
_FULLWIDTH = _FontFormat(256, _fullwidth_layout)


def _font_palette() -> Palette:
    return Palette([Color(red=r, green=g, blue=b) for r, g, b in FONT_PALETTE])


def _decode(data: bytes, fmt: _FontFormat, num_rows: int) -> Image:
    pixels = bytearray(fmt.size_for_rows(num_rows))
    for src, dest in fmt.layout(num_rows):
        pixels[dest] = data[src + 1]
        pixels[dest + 1] = data[src]
    return Image(
        width=fmt.width,
        height=num_rows * _GLYPH_ROW_PIXELS,
        bit_depth=2,
        pixels=bytes(pixels),
        has_palette=True,
        palette=_font_palette(),
        has_transparency=False,
    )


def _encode(image: Image, fmt: _FontFormat) -> bytes:
    if image.width != fmt.width:
        raise GfxError(f"The width of the font image ({image.width}) is not {fmt.width}.")
    if image.height % _GLYPH_ROW_PIXELS != 0:
        raise GfxError(
            f"The height of the font image ({image.height}) is not a multiple of 16."
        )
    num_rows = image.height // _GLYPH_ROW_PIXELS
    size = fmt.size_for_rows(num_rows)
    pixels = bytes(image.pixels)
    if len(pixels) < size:
        raise GfxError("The font image pixel data is shorter than its dimensions require.")

    out = bytearray(size)
    for dest, src in fmt.layout(num_rows):
        out[dest] = pixels[src + 1]
        out[dest + 1] = pixels[src]
    return bytes(out)


def _rows_from_glyphs(num_glyphs: int) -> int:
    if num_glyphs % _GLYPHS_PER_ROW != 0:
        raise GfxError(f"The number of glyphs ({num_glyphs}) is not a multiple of 16.")
    return num_glyphs // _GLYPHS_PER_ROW


def read_latin_font(path: PathType) -> Image:
    """Read a Latin font file into a 256-pixel-wide 2bpp image."""
    data = read_whole_file(path)
    num_rows = _rows_from_glyphs(len(data) // 64)
    return _decode(data, _LATIN, num_rows)


def write_latin_font(path: PathType, image: Image) -> None:
    """Write a 256-pixel-wide 2bpp image as a Latin font file."""
    write_whole_file(path, _encode(image, _LATIN))


def read_halfwidth_japanese_font(path: PathType) -> Image:
    """Read a half-width Japanese font file into a 128-pixel-wide 2bpp image."""
    data = read_whole_file(path)
    glyph_size = 32
    if len(data) % glyph_size != 0:
        raise GfxError(f"The file size ({len(data)}) is not a multiple of {glyph_size}.")
    num_rows = _rows_from_glyphs(len(data) // glyph_size)
    return _decode(data, _HALFWIDTH, num_rows)


def write_halfwidth_japanese_font(path: PathType, image: Image) -> None:
    """Write a 128-pixel-wide 2bpp image as a half-width Japanese font file."""
    write_whole_file(path, _encode(image, _HALFWIDTH))


def read_fullwidth_japanese_font(path: PathType) -> Image:
    """Read a full-width Japanese font file into a 256-pixel-wide 2bpp image."""
    data = read_whole_file(path)
    num_rows = _rows_from_glyphs(len(data) // 64)
    return _decode(data, _FULLWIDTH, num_rows)


def write_fullwidth_japanese_font(path: PathType, image: Image) -> None:
    """Write a 256-pixel-wide 2bpp image as a full-width Japanese font file."""
    write_whole_file(path, _encode(image, _FULLWIDTH))