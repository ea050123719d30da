"""Tiled GBA graphics and 15-bit GBA palettes."""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass, field

from .util import GfxError, PathType, read_whole_file, write_whole_file

MAX_PALETTE_COLORS = 256
_SUPPORTED_BIT_DEPTHS = (1, 4, 8)


@dataclass
class Color:
    """An 8-bit-per-channel colour plus the spare GBA palette bit."""

    red: int = 0
    green: int = 0
    blue: int = 0
    green_lsb: int = 0


@dataclass
class Palette:
    """An ordered list of colours."""

    colors: list[Color] = field(default_factory=list)


@dataclass
class Image:
    """A packed, row-major indexed image."""

    width: int = 0
    height: int = 0
    bit_depth: int = 0
    pixels: bytes = b""
    has_palette: bool = False
    palette: Palette = field(default_factory=Palette)
    has_transparency: bool = False


def _reverse_bits(value: int) -> int:
    return int(f"{value:08b}"[::-1], 2)


def _swap_nibbles(value: int) -> int:
    return ((value & 0xF) << 4) | (value >> 4)


def _byte_table(bit_depth: int, invert_colors: bool) -> bytes:
    """Translation table between a tile byte and a packed image byte.

    The mapping is its own inverse, so it serves both directions.
    """
    if bit_depth not in _SUPPORTED_BIT_DEPTHS:
        raise ValueError(f"unsupported bit depth {bit_depth}; must be 1, 4 or 8")
    mask = 0xFF if invert_colors else 0
    if bit_depth == 1:
        values = [_reverse_bits(value) for value in range(256)]
    elif bit_depth == 4:
        values = [_swap_nibbles(value) for value in range(256)]
    else:
        values = list(range(256))
    return bytes(value ^ mask for value in values)


def _tile_cells(
    num_tiles: int, metatiles_wide: int, metatile_width: int, metatile_height: int
) -> Iterator[tuple[int, int]]:
    """Yield the (tile column, tile row) of each tile in metatile order."""
    tiles_per_metatile = metatile_width * metatile_height
    for index in range(num_tiles):
        metatile, within = divmod(index, tiles_per_metatile)
        sub_y, sub_x = divmod(within, metatile_width)
        meta_y, meta_x = divmod(metatile, metatiles_wide)
        yield meta_x * metatile_width + sub_x, meta_y * metatile_height + sub_y


def _check_metatiles(
    tiles_width: int, tiles_height: int, metatile_width: int, metatile_height: int
) -> None:
    if tiles_width % metatile_width != 0:
        raise GfxError(
            f"The width in tiles ({tiles_width}) isn't a multiple of the "
            f"specified metatile width ({metatile_width})"
        )
    if tiles_height % metatile_height != 0:
        raise GfxError(
            f"The height in tiles ({tiles_height}) isn't a multiple of the "
            f"specified metatile height ({metatile_height})"
        )


def tiles_to_pixels(
    data: bytes,
    tiles_width: int,
    bit_depth: int,
    metatile_width: int = 1,
    metatile_height: int = 1,
    invert_colors: bool = False,
) -> Image:
    """Lay out raw 8x8 tile data as a packed image ``tiles_width`` tiles wide."""
    table = _byte_table(bit_depth, invert_colors)
    tile_size = bit_depth * 8
    num_tiles = len(data) // tile_size
    tiles_height = -(-num_tiles // tiles_width)

    _check_metatiles(tiles_width, tiles_height, metatile_width, metatile_height)

    pitch = tiles_width * bit_depth
    pixels = bytearray(tiles_width * tiles_height * tile_size)
    metatiles_wide = tiles_width // metatile_width

    cells = _tile_cells(num_tiles, metatiles_wide, metatile_width, metatile_height)
    for tile_index, (tile_x, tile_y) in enumerate(cells):
        tile_offset = tile_index * tile_size
        for row in range(8):
            src = tile_offset + row * bit_depth
            dest = (tile_y * 8 + row) * pitch + tile_x * bit_depth
            pixels[dest:dest + bit_depth] = data[src:src + bit_depth].translate(table)

    return Image(
        width=tiles_width * 8,
        height=tiles_height * 8,
        bit_depth=bit_depth,
        pixels=bytes(pixels),
    )


def pixels_to_tiles(
    image: Image,
    num_tiles: int = 0,
    bit_depth: int | None = None,
    metatile_width: int = 1,
    metatile_height: int = 1,
    invert_colors: bool = False,
) -> bytes:
    """Cut a packed image into raw 8x8 tiles; ``num_tiles`` 0 means all of them."""
    if bit_depth is None:
        bit_depth = image.bit_depth
    table = _byte_table(bit_depth, invert_colors)
    tile_size = bit_depth * 8

    if image.width % 8 != 0:
        raise GfxError(f"The width in pixels ({image.width}) isn't a multiple of 8.")
    if image.height % 8 != 0:
        raise GfxError(f"The height in pixels ({image.height}) isn't a multiple of 8.")

    tiles_width = image.width // 8
    tiles_height = image.height // 8
    _check_metatiles(tiles_width, tiles_height, metatile_width, metatile_height)

    max_num_tiles = tiles_width * tiles_height
    if num_tiles == 0:
        num_tiles = max_num_tiles
    elif num_tiles > max_num_tiles:
        raise GfxError(
            f"The specified number of tiles ({num_tiles}) is greater than the "
            f"maximum possible value ({max_num_tiles})."
        )

    pitch = tiles_width * bit_depth
    if len(image.pixels) < pitch * image.height:
        raise GfxError("The image pixel data is shorter than its dimensions require.")

    pixels = bytes(image.pixels)
    metatiles_wide = tiles_width // metatile_width
    out = bytearray()
    for tile_x, tile_y in _tile_cells(num_tiles, metatiles_wide, metatile_width, metatile_height):
        for row in range(8):
            src = (tile_y * 8 + row) * pitch + tile_x * bit_depth
            out += pixels[src:src + bit_depth].translate(table)
    return bytes(out)


def read_image(
    path: PathType,
    tiles_width: int,
    bit_depth: int,
    metatile_width: int = 1,
    metatile_height: int = 1,
    invert_colors: bool = False,
) -> Image:
    """Read a raw tile file into an image."""
    return tiles_to_pixels(
        read_whole_file(path), tiles_width, bit_depth, metatile_width, metatile_height, invert_colors
    )


def write_image(
    path: PathType,
    image: Image,
    num_tiles: int = 0,
    bit_depth: int | None = None,
    metatile_width: int = 1,
    metatile_height: int = 1,
    invert_colors: bool = False,
) -> None:
    """Write an image to a raw tile file."""
    data = pixels_to_tiles(image, num_tiles, bit_depth, metatile_width, metatile_height, invert_colors)
    write_whole_file(path, data)


def _upconvert(value: int) -> int:
    return ((value * 255) // 31) & 0xF8


def decode_gba_palette(data: bytes) -> Palette:
    """Decode little-endian 15-bit GBA colour entries."""
    if len(data) % 2 != 0:
        raise GfxError(f"The file size ({len(data)}) is not a multiple of 2.")
    if len(data) // 2 > MAX_PALETTE_COLORS:
        raise GfxError(f"Palettes with more than {MAX_PALETTE_COLORS} colors are not supported.")
    colors = []
    for offset in range(0, len(data), 2):
        entry = int.from_bytes(data[offset:offset + 2], "little")
        colors.append(
            Color(
                red=_upconvert(entry & 0x1F),
                green=_upconvert((entry >> 5) & 0x1F),
                blue=_upconvert((entry >> 10) & 0x1F),
                green_lsb=(entry >> 15) & 1,
            )
        )
    return Palette(colors)


def encode_gba_palette(palette: Palette) -> bytes:
    """Encode a palette as little-endian 15-bit GBA colour entries."""
    out = bytearray()
    for color in palette.colors:
        entry = (
            ((color.green_lsb & 0xFF) << 15)
            | ((color.blue // 8) << 10)
            | ((color.green // 8) << 5)
            | (color.red // 8)
        ) & 0xFFFF
        out += entry.to_bytes(2, "little")
    return bytes(out)


def read_gba_palette(path: PathType) -> Palette:
    """Read a .gbapal file."""
    return decode_gba_palette(read_whole_file(path))


def write_gba_palette(path: PathType, palette: Palette) -> None:
    """Write a .gbapal file."""
    data = encode_gba_palette(palette)
    try:
        with open(path, "wb") as fp:
            fp.write(data)
    except OSError as exc:
        raise GfxError(f'Failed to open "{os.fspath(path)}" for writing.') from exc