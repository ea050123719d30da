"""Reading and writing indexed and greyscale PNG images."""

from __future__ import annotations

import os
import struct
import zlib
from dataclasses import dataclass, field

from .gfx import MAX_PALETTE_COLORS, Color, Image, Palette
from .util import GfxError, PathType

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
COLOR_TYPE_GRAY = 0
COLOR_TYPE_PALETTE = 3

_VALID_DEPTHS = {
    COLOR_TYPE_GRAY: (1, 2, 4, 8, 16),
    COLOR_TYPE_PALETTE: (1, 2, 4, 8),
}
_CONVERTIBLE_DEPTHS = (1, 2, 4, 8)

# (x start, y start, x step, y step) of each Adam7 pass
_ADAM7 = (
    (0, 0, 8, 8),
    (4, 0, 8, 8),
    (0, 4, 4, 8),
    (2, 0, 4, 4),
    (0, 2, 2, 4),
    (1, 0, 2, 2),
    (0, 1, 1, 2),
)


@dataclass
class _PngFile:
    width: int
    height: int
    bit_depth: int
    color_type: int
    interlaced: bool
    palette: list[tuple[int, int, int]] | None = None
    idat: bytearray = field(default_factory=bytearray)


def _row_bytes(width: int, bit_depth: int) -> int:
    return (width * bit_depth + 7) // 8


def _load(path: PathType) -> _PngFile:
    name = os.fspath(path)
    try:
        with open(path, "rb") as fp:
            data = fp.read()
    except OSError as exc:
        raise GfxError(f'Failed to open "{name}" for reading.') from exc

    if len(data) < len(PNG_SIGNATURE):
        raise GfxError(f'Failed to read PNG signature from "{name}".')
    if data[:8] != PNG_SIGNATURE:
        raise GfxError(f'"{name}" does not have a valid PNG signature.')

    png: _PngFile | None = None
    pos = 8
    while True:
        if pos + 8 > len(data):
            raise GfxError(f'Error reading from "{name}".')
        length, kind = struct.unpack(">I4s", data[pos:pos + 8])
        body = data[pos + 8:pos + 8 + length]
        crc_bytes = data[pos + 8 + length:pos + 12 + length]
        if len(body) != length or len(crc_bytes) != 4:
            raise GfxError(f'Error reading from "{name}".')
        if zlib.crc32(kind + body) != int.from_bytes(crc_bytes, "big"):
            raise GfxError(f'CRC error in "{name}".')
        pos += 12 + length

        if kind == b"IHDR":
            if png is not None or length != 13:
                raise GfxError(f'Invalid IHDR chunk in "{name}".')
            width, height, depth, ctype, compression, filtering, interlace = struct.unpack(
                ">IIBBBBB", body
            )
            if width == 0 or height == 0 or compression != 0 or filtering != 0 or interlace > 1:
                raise GfxError(f'Invalid IHDR chunk in "{name}".')
            png = _PngFile(width, height, depth, ctype, interlace == 1)
        elif png is None:
            raise GfxError(f'"{name}" is missing its IHDR chunk.')
        elif kind == b"PLTE":
            if length % 3 != 0 or length == 0:
                raise GfxError(f'Invalid palette in "{name}".')
            png.palette = [tuple(body[i:i + 3]) for i in range(0, length, 3)]
        elif kind == b"IDAT":
            if png.color_type == COLOR_TYPE_PALETTE and png.palette is None:
                raise GfxError(f'Missing PLTE before IDAT in "{name}".')
            png.idat += body
        elif kind == b"IEND":
            return png
        elif not kind[0] & 0x20:
            raise GfxError(f'Unknown critical chunk {kind!r} in "{name}".')


def _paeth(left: int, up: int, up_left: int) -> int:
    estimate = left + up - up_left
    dist_left = abs(estimate - left)
    dist_up = abs(estimate - up)
    dist_up_left = abs(estimate - up_left)
    if dist_left <= dist_up and dist_left <= dist_up_left:
        return left
    if dist_up <= dist_up_left:
        return up
    return up_left


def _unfilter(
    data: bytes, pos: int, rows: int, row_bytes: int, bpp: int
) -> tuple[list[bytes], int]:
    """Undo PNG row filters; return the rows and the position after them."""
    prev = bytearray(row_bytes)
    out = []
    for _ in range(rows):
        if pos + 1 + row_bytes > len(data):
            raise GfxError("PNG image data is truncated.")
        filter_type = data[pos]
        line = bytearray(data[pos + 1:pos + 1 + row_bytes])
        pos += 1 + row_bytes
        if filter_type == 1:
            for i in range(bpp, row_bytes):
                line[i] = (line[i] + line[i - bpp]) & 0xFF
        elif filter_type == 2:
            for i in range(row_bytes):
                line[i] = (line[i] + prev[i]) & 0xFF
        elif filter_type == 3:
            for i in range(row_bytes):
                left = line[i - bpp] if i >= bpp else 0
                line[i] = (line[i] + ((left + prev[i]) >> 1)) & 0xFF
        elif filter_type == 4:
            for i in range(row_bytes):
                left = line[i - bpp] if i >= bpp else 0
                up_left = prev[i - bpp] if i >= bpp else 0
                line[i] = (line[i] + _paeth(left, prev[i], up_left)) & 0xFF
        elif filter_type != 0:
            raise GfxError(f"Unknown PNG filter type {filter_type}.")
        out.append(bytes(line))
        prev = line
    return out, pos


def _unpack_row(row: bytes, width: int, bit_depth: int) -> list[int]:
    if bit_depth == 8:
        return list(row[:width])
    if bit_depth == 16:
        return [int.from_bytes(row[2 * i:2 * i + 2], "big") for i in range(width)]
    per_byte = 8 // bit_depth
    mask = (1 << bit_depth) - 1
    return [
        (row[i // per_byte] >> (8 - bit_depth * (i % per_byte + 1))) & mask
        for i in range(width)
    ]


def _pack_row(samples: list[int], bit_depth: int) -> bytes:
    if bit_depth == 8:
        return bytes(samples)
    if bit_depth == 16:
        return b"".join(value.to_bytes(2, "big") for value in samples)
    per_byte = 8 // bit_depth
    out = bytearray(_row_bytes(len(samples), bit_depth))
    for index, value in enumerate(samples):
        out[index // per_byte] |= value << (8 - bit_depth * (index % per_byte + 1))
    return bytes(out)


def _decode_rows(png: _PngFile) -> list[bytes]:
    try:
        raw = zlib.decompress(bytes(png.idat))
    except zlib.error as exc:
        raise GfxError(f"Corrupt PNG image data: {exc}") from exc

    bpp = max(1, png.bit_depth // 8)
    row_bytes = _row_bytes(png.width, png.bit_depth)
    if not png.interlaced:
        rows, _ = _unfilter(raw, 0, png.height, row_bytes, bpp)
        return rows

    grid = [[0] * png.width for _ in range(png.height)]
    pos = 0
    for x0, y0, dx, dy in _ADAM7:
        pass_width = (png.width - x0 + dx - 1) // dx if png.width > x0 else 0
        pass_height = (png.height - y0 + dy - 1) // dy if png.height > y0 else 0
        if pass_width == 0 or pass_height == 0:
            continue
        rows, pos = _unfilter(
            raw, pos, pass_height, _row_bytes(pass_width, png.bit_depth), bpp
        )
        for row_index, row in enumerate(rows):
            target = grid[y0 + row_index * dy]
            for col_index, value in enumerate(_unpack_row(row, pass_width, png.bit_depth)):
                target[x0 + col_index * dx] = value
    return [_pack_row(samples, png.bit_depth) for samples in grid]


def _convert_row(row: bytes, width: int, src_depth: int, dest_depth: int) -> bytes:
    samples = _unpack_row(row, width, src_depth)
    limit = 1 << dest_depth
    if any(value >= limit for value in samples):
        raise GfxError(
            f"Image exceeds the maximum color value for a {dest_depth}bpp image."
        )
    return _pack_row(samples, dest_depth)


def read_png(path: PathType, bit_depth: int) -> Image:
    """Read a greyscale or indexed PNG, repacking pixels to ``bit_depth`` bits."""
    png = _load(path)
    if png.color_type not in (COLOR_TYPE_GRAY, COLOR_TYPE_PALETTE):
        raise GfxError(f'"{os.fspath(path)}" has an unsupported color type.')
    if png.bit_depth not in _VALID_DEPTHS[png.color_type]:
        raise GfxError(f'"{os.fspath(path)}" has an invalid bit depth.')

    rows = _decode_rows(png)
    if png.bit_depth != bit_depth:
        if png.bit_depth not in _CONVERTIBLE_DEPTHS or bit_depth not in _CONVERTIBLE_DEPTHS:
            raise GfxError("Bit depth of image must be 1, 2, 4, or 8.")
        rows = [_convert_row(row, png.width, png.bit_depth, bit_depth) for row in rows]

    return Image(
        width=png.width,
        height=png.height,
        bit_depth=bit_depth,
        pixels=b"".join(rows),
        has_palette=png.color_type == COLOR_TYPE_PALETTE,
    )


def read_png_palette(path: PathType) -> Palette:
    """Read the palette of an indexed PNG."""
    png = _load(path)
    if png.color_type != COLOR_TYPE_PALETTE:
        raise GfxError(f'The image "{os.fspath(path)}" does not contain a palette.')
    if png.palette is None:
        raise GfxError(f'Failed to retrieve palette from "{os.fspath(path)}".')
    if len(png.palette) > MAX_PALETTE_COLORS:
        raise GfxError("Images with more than 256 colors are not supported.")
    return Palette([Color(red=r, green=g, blue=b) for r, g, b in png.palette])


def _chunk(kind: bytes, body: bytes) -> bytes:
    return (
        struct.pack(">I", len(body))
        + kind
        + body
        + struct.pack(">I", zlib.crc32(kind + body))
    )


def write_png(path: PathType, image: Image) -> None:
    """Write an image as an indexed (if it has a palette) or greyscale PNG."""
    name = os.fspath(path)
    color_type = COLOR_TYPE_PALETTE if image.has_palette else COLOR_TYPE_GRAY
    if image.bit_depth not in _VALID_DEPTHS[color_type]:
        raise GfxError(f'Error writing header for "{name}": invalid bit depth {image.bit_depth}.')
    if image.width <= 0 or image.height <= 0:
        raise GfxError(f'Error writing header for "{name}": invalid image size.')

    row_bytes = _row_bytes(image.width, image.bit_depth)
    pixels = bytes(image.pixels)
    if len(pixels) < row_bytes * image.height:
        raise GfxError(f'Error writing "{name}": pixel data is too short.')

    parts = [
        PNG_SIGNATURE,
        _chunk(
            b"IHDR",
            struct.pack(">IIBBBBB", image.width, image.height, image.bit_depth, color_type, 0, 0, 0),
        ),
    ]
    if image.has_palette:
        colors = image.palette.colors
        if not 1 <= len(colors) <= MAX_PALETTE_COLORS:
            raise GfxError(f'Error writing header for "{name}": invalid palette length.')
        parts.append(
            _chunk(b"PLTE", bytes(c for color in colors for c in (color.red, color.green, color.blue)))
        )
        if image.has_transparency:
            parts.append(_chunk(b"tRNS", b"\x00"))

    raw = b"".join(
        b"\x00" + pixels[offset:offset + row_bytes]
        for offset in range(0, row_bytes * image.height, row_bytes)
    )
    parts.append(_chunk(b"IDAT", zlib.compress(raw)))
    parts.append(_chunk(b"IEND", b""))

    try:
        with open(path, "wb") as fp:
            fp.write(b"".join(parts))
    except OSError as exc:
        raise GfxError(f'Failed to open "{name}" for writing.') from exc