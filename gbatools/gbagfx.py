"""Command-line converter between GBA graphics, palettes, fonts and compressed data."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass

from .convert_png import read_png, read_png_palette, write_png
from .font import (
    read_fullwidth_japanese_font,
    read_halfwidth_japanese_font,
    read_latin_font,
    write_fullwidth_japanese_font,
    write_halfwidth_japanese_font,
    write_latin_font,
)
from .gfx import Color, Palette, read_gba_palette, read_image, write_gba_palette, write_image
from .jasc_pal import read_jasc_palette, write_jasc_palette
from .lz import lz_compress, lz_decompress
from .rl import rl_compress, rl_decompress
from .util import (
    GfxError,
    PathType,
    get_file_extension,
    parse_number,
    read_whole_file,
    read_whole_file_zero_padded,
    write_whole_file,
)

USAGE = "Usage: gbagfx INPUT_PATH OUTPUT_PATH [options...]"


@dataclass
class GbaToPngOptions:
    """Settings for turning raw tile data into a PNG."""

    bit_depth: int
    palette_file_path: PathType | None = None
    has_transparency: bool = False
    width: int = 1
    metatile_width: int = 1
    metatile_height: int = 1


@dataclass
class PngToGbaOptions:
    """Settings for turning a PNG into raw tile data."""

    bit_depth: int
    num_tiles: int = 0
    metatile_width: int = 1
    metatile_height: int = 1


def convert_gba_to_png(input_path: PathType, output_path: PathType, options: GbaToPngOptions) -> None:
    """Convert a raw tile file to a PNG, using a GBA palette if one is given."""
    palette = None
    if options.palette_file_path is not None:
        palette = read_gba_palette(options.palette_file_path)

    has_palette = palette is not None
    image = read_image(
        input_path,
        options.width,
        options.bit_depth,
        options.metatile_width,
        options.metatile_height,
        not has_palette,
    )
    image.has_palette = has_palette
    if palette is not None:
        image.palette = palette
    image.has_transparency = options.has_transparency
    write_png(output_path, image)


def convert_png_to_gba(input_path: PathType, output_path: PathType, options: PngToGbaOptions) -> None:
    """Convert a PNG to a raw tile file."""
    image = read_png(input_path, options.bit_depth)
    write_image(
        output_path,
        image,
        options.num_tiles,
        options.bit_depth,
        options.metatile_width,
        options.metatile_height,
        not image.has_palette,
    )


def _next_value(args: Iterator[str], missing: str) -> str:
    try:
        return next(args)
    except StopIteration:
        raise GfxError(missing) from None


def _positive_int(text: str, parse_failed: str, not_positive: str) -> int:
    try:
        value, _ = parse_number(text, 10)
    except ValueError as exc:
        raise GfxError(parse_failed) from exc
    if value < 1:
        raise GfxError(not_positive)
    return value


def _metatile_option(option: str, args: Iterator[str]) -> int:
    if option == "-mwidth":
        return _positive_int(
            _next_value(args, 'No metatile width value following "-mwidth".'),
            "Failed to parse metatile width.",
            "metatile width must be positive.",
        )
    return _positive_int(
        _next_value(args, 'No metatile height value following "-mheight".'),
        "Failed to parse metatile height.",
        "metatile height must be positive.",
    )


def _bit_depth_from_extension(path: PathType) -> int:
    extension = get_file_extension(path) or ""
    if not extension[:1].isdigit():
        raise GfxError(f'Cannot tell the bit depth of "{path}".')
    return int(extension[0])


def _handle_gba_to_png(input_path: str, output_path: str, args: Sequence[str]) -> None:
    options = GbaToPngOptions(bit_depth=_bit_depth_from_extension(input_path))
    it = iter(args)
    for option in it:
        if option == "-palette":
            options.palette_file_path = _next_value(it, 'No palette file path following "-palette".')
        elif option == "-object":
            options.has_transparency = True
        elif option == "-width":
            options.width = _positive_int(
                _next_value(it, 'No width following "-width".'),
                "Failed to parse width.",
                "Width must be positive.",
            )
        elif option == "-mwidth":
            options.metatile_width = _metatile_option(option, it)
        elif option == "-mheight":
            options.metatile_height = _metatile_option(option, it)
        else:
            raise GfxError(f'Unrecognized option "{option}".')

    options.width = max(options.width, options.metatile_width)
    convert_gba_to_png(input_path, output_path, options)


def _handle_png_to_gba(input_path: str, output_path: str, args: Sequence[str]) -> None:
    options = PngToGbaOptions(bit_depth=_bit_depth_from_extension(output_path))
    it = iter(args)
    for option in it:
        if option == "-num_tiles":
            options.num_tiles = _positive_int(
                _next_value(it, 'No number of tiles following "-num_tiles".'),
                "Failed to parse number of tiles.",
                "Number of tiles must be positive.",
            )
        elif option == "-mwidth":
            options.metatile_width = _metatile_option(option, it)
        elif option == "-mheight":
            options.metatile_height = _metatile_option(option, it)
        else:
            raise GfxError(f'Unrecognized option "{option}".')

    convert_png_to_gba(input_path, output_path, options)


def _handle_png_to_gba_palette(input_path: str, output_path: str, args: Sequence[str]) -> None:
    write_gba_palette(output_path, read_png_palette(input_path))


def _handle_gba_to_jasc_palette(input_path: str, output_path: str, args: Sequence[str]) -> None:
    write_jasc_palette(output_path, read_gba_palette(input_path))


def _handle_jasc_to_gba_palette(input_path: str, output_path: str, args: Sequence[str]) -> None:
    num_colors = 0
    it = iter(args)
    for option in it:
        if option == "-num_colors":
            num_colors = _positive_int(
                _next_value(it, 'No number of colors following "-num_colors".'),
                "Failed to parse number of colors.",
                "Number of colors must be positive.",
            )
        else:
            raise GfxError(f'Unrecognized option "{option}".')

    palette = read_jasc_palette(input_path)
    if num_colors:
        colors = palette.colors[:num_colors]
        colors.extend(Color() for _ in range(num_colors - len(colors)))
        palette = Palette(colors)
    write_gba_palette(output_path, palette)


def _font_to_png(reader: Callable[[PathType], object]) -> Callable[[str, str, Sequence[str]], None]:
    def handler(input_path: str, output_path: str, args: Sequence[str]) -> None:
        write_png(output_path, reader(input_path))

    return handler


def _png_to_font(writer: Callable[[PathType, object], None]) -> Callable[[str, str, Sequence[str]], None]:
    def handler(input_path: str, output_path: str, args: Sequence[str]) -> None:
        writer(output_path, read_png(input_path, 2))

    return handler


def _handle_lz_compress(input_path: str, output_path: str, args: Sequence[str]) -> None:
    overflow_size = 0
    it = iter(args)
    for option in it:
        if option == "-overflow":
            overflow_size = _positive_int(
                _next_value(it, 'No size following "-overflow".'),
                "Failed to parse overflow size.",
                "Overflow size must be positive.",
            )
        else:
            raise GfxError(f'Unrecognized option "{option}".')

    # Appending zeros and then recording the original size in the header
    # reproduces tilesets that overflow their buffer when decompressed.
    data = read_whole_file_zero_padded(input_path, overflow_size)
    file_size = len(data) - overflow_size
    compressed = bytearray(lz_compress(data))
    compressed[1:4] = (file_size & 0xFFFFFF).to_bytes(3, "little")
    write_whole_file(output_path, bytes(compressed))


def _handle_lz_decompress(input_path: str, output_path: str, args: Sequence[str]) -> None:
    write_whole_file(output_path, lz_decompress(read_whole_file(input_path)))


def _handle_rl_compress(input_path: str, output_path: str, args: Sequence[str]) -> None:
    write_whole_file(output_path, rl_compress(read_whole_file(input_path)))


def _handle_rl_decompress(input_path: str, output_path: str, args: Sequence[str]) -> None:
    write_whole_file(output_path, rl_decompress(read_whole_file(input_path)))


_Handler = Callable[[str, str, Sequence[str]], None]

_HANDLERS: tuple[tuple[str | None, str | None, _Handler], ...] = (
    ("1bpp", "png", _handle_gba_to_png),
    ("4bpp", "png", _handle_gba_to_png),
    ("8bpp", "png", _handle_gba_to_png),
    ("png", "1bpp", _handle_png_to_gba),
    ("png", "4bpp", _handle_png_to_gba),
    ("png", "8bpp", _handle_png_to_gba),
    ("png", "gbapal", _handle_png_to_gba_palette),
    ("gbapal", "pal", _handle_gba_to_jasc_palette),
    ("pal", "gbapal", _handle_jasc_to_gba_palette),
    ("latfont", "png", _font_to_png(read_latin_font)),
    ("png", "latfont", _png_to_font(write_latin_font)),
    ("hwjpnfont", "png", _font_to_png(read_halfwidth_japanese_font)),
    ("png", "hwjpnfont", _png_to_font(write_halfwidth_japanese_font)),
    ("fwjpnfont", "png", _font_to_png(read_fullwidth_japanese_font)),
    ("png", "fwjpnfont", _png_to_font(write_fullwidth_japanese_font)),
    (None, "lz", _handle_lz_compress),
    ("lz", None, _handle_lz_decompress),
    (None, "rl", _handle_rl_compress),
    ("rl", None, _handle_rl_decompress),
)


def _run(argv: Sequence[str]) -> None:
    if len(argv) < 2:
        raise GfxError(USAGE)

    input_path, output_path, *options = argv
    input_extension = get_file_extension(input_path)
    output_extension = get_file_extension(output_path)

    if input_extension is None:
        raise GfxError(f'Input file "{input_path}" has no extension.')
    if output_extension is None:
        raise GfxError(f'Output file "{output_path}" has no extension.')

    for in_ext, out_ext, handler in _HANDLERS:
        if in_ext in (None, input_extension) and out_ext in (None, output_extension):
            handler(input_path, output_path, options)
            return

    raise GfxError(f'Don\'t know how to convert "{input_path}" to "{output_path}".')


def main(argv: Sequence[str] | None = None) -> int:
    """Run the converter; return 0 on success and 1 on error."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        _run(list(argv))
    except GfxError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())