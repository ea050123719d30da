"""Paint Shop Pro (JASC-PAL) palette files."""

from __future__ import annotations

import os

from .gfx import MAX_PALETTE_COLORS, Color, Palette
from .util import GfxError, PathType, parse_number

MAX_LINE_LENGTH = 11


class _LineReader:
    """Reads CRLF-terminated lines of bounded length from a byte string."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._data)

    def _next(self) -> int | None:
        if self.at_end:
            return None
        value = self._data[self._pos]
        self._pos += 1
        return value

    def read_line(self) -> str:
        line = bytearray()
        while True:
            char = self._next()
            if char == 0x0D:
                if self._next() != 0x0A:
                    raise GfxError("CR line endings aren't supported.")
                return line.decode("latin-1")
            if char == 0x0A:
                raise GfxError("LF line endings aren't supported.")
            if char is None:
                raise GfxError("Unexpected EOF. No CRLF at end of file.")
            if char == 0:
                raise GfxError("NUL character in file.")
            if len(line) == MAX_LINE_LENGTH:
                raise GfxError(f'The line "{line.decode("latin-1")}" is too long.')
            line.append(char)


def _parse_component(line: str, pos: int, name: str) -> tuple[int, int]:
    try:
        value, length = parse_number(line[pos:], 10)
    except ValueError as exc:
        raise GfxError(f"Failed to parse {name} color component.") from exc
    return value, pos + length


def _expect_separator(line: str, pos: int, before: str, after: str) -> int:
    if line[pos:pos + 1] != " ":
        raise GfxError(f"Expected a space after {before} color component.")
    pos += 1
    if not line[pos:pos + 1].isdigit():
        raise GfxError(f"Expected only a space between {before} and {after} color components.")
    return pos


def _parse_color_line(line: str) -> Color:
    red, pos = _parse_component(line, 0, "red")
    pos = _expect_separator(line, pos, "red", "green")
    green, pos = _parse_component(line, pos, "green")
    pos = _expect_separator(line, pos, "green", "blue")
    blue, pos = _parse_component(line, pos, "blue")
    if pos != len(line):
        raise GfxError("Garbage after blue color component.")

    for name, value in (("Red", red), ("Green", green), ("Blue", blue)):
        if not 0 <= value <= 255:
            raise GfxError(f"{name} color component ({value}) is outside the range [0, 255].")

    return Color(
        red=red & 0xF8,
        green=green & 0xF8,
        blue=blue & 0xF8,
        green_lsb=(green & 4) >> 2,
    )


def parse_jasc_palette(data: bytes) -> Palette:
    """Parse the contents of a JASC-PAL file."""
    reader = _LineReader(bytes(data))

    if reader.read_line() != "JASC-PAL":
        raise GfxError("Invalid JASC-PAL signature.")
    if reader.read_line() != "0100":
        raise GfxError("Unsuported JASC-PAL version.")

    try:
        num_colors, _ = parse_number(reader.read_line(), 10)
    except ValueError as exc:
        raise GfxError("Failed to parse number of colors.") from exc
    if not 1 <= num_colors <= MAX_PALETTE_COLORS:
        raise GfxError(
            f"{num_colors} is an invalid number of colors. "
            f"The number of colors must be in the range [1, {MAX_PALETTE_COLORS}]."
        )

    colors = [_parse_color_line(reader.read_line()) for _ in range(num_colors)]

    if not reader.at_end:
        raise GfxError("Garbage after color data.")
    return Palette(colors)


def format_jasc_palette(palette: Palette) -> bytes:
    """Render a palette as JASC-PAL file contents."""
    lines = ["JASC-PAL", "0100", str(len(palette.colors))]
    lines.extend(
        f"{color.red} {color.green | (color.green_lsb << 2)} {color.blue}"
        for color in palette.colors
    )
    return "".join(f"{line}\r\n" for line in lines).encode("ascii")


def read_jasc_palette(path: PathType) -> Palette:
    """Read a JASC-PAL file."""
    try:
        with open(path, "rb") as fp:
            data = fp.read()
    except OSError as exc:
        raise GfxError(
            f'Failed to open JASC-PAL file "{os.fspath(path)}" for reading.'
        ) from exc
    return parse_jasc_palette(data)


def write_jasc_palette(path: PathType, palette: Palette) -> None:
    """Write a JASC-PAL file."""
    data = format_jasc_palette(palette)
    try:
        with open(path, "wb") as fp:
            fp.write(data)
    except OSError as exc:
        raise GfxError(f'Failed to open "{os.fspath(path)}" for writing.') from exc