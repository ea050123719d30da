import pytest

from gbatools.gfx import Color, Palette
from gbatools.jasc_pal import (
    format_jasc_palette,
    parse_jasc_palette,
    read_jasc_palette,
    write_jasc_palette,
)
from gbatools.util import GfxError

HEADER = b"JASC-PAL\r\n0100\r\n"


def _doc(*lines):
    return HEADER + b"".join(line + b"\r\n" for line in lines)


def test_parse_masks_components():
    palette = parse_jasc_palette(_doc(b"2", b"0 0 0", b"255 255 255"))
    assert palette.colors[0] == Color(0, 0, 0, 0)
    assert palette.colors[1] == Color(248, 248, 248, 1)


def test_format_includes_green_lsb():
    data = format_jasc_palette(Palette([Color(8, 16, 24, 1)]))
    assert data == _doc(b"1", b"8 20 24")


def test_text_round_trip():
    data = _doc(b"3", b"8 12 16", b"0 0 248", b"248 252 0")
    assert format_jasc_palette(parse_jasc_palette(data)) == data


def test_file_round_trip(tmp_path):
    palette = Palette([Color(16, 32, 48, 0), Color(200, 104, 8, 1)])
    path = tmp_path / "p.pal"
    write_jasc_palette(path, palette)
    assert read_jasc_palette(path) == palette


def test_trailing_text_after_count_is_ignored():
    palette = parse_jasc_palette(_doc(b"1x", b"8 8 8"))
    assert palette.colors == [Color(8, 8, 8, 0)]


@pytest.mark.parametrize(
    "data",
    [
        b"JASC-PAL\n0100\n1\n0 0 0\n",
        b"JASC-PAL\r0100\r\n1\r\n0 0 0\r\n",
        b"JASC-PEL\r\n0100\r\n1\r\n0 0 0\r\n",
        b"JASC-PAL\r\n0200\r\n1\r\n0 0 0\r\n",
        _doc(b"0"),
        _doc(b"257"),
        _doc(b"abc"),
        _doc(b"1", b"0 0 0", b"0 0 0"),
        _doc(b"1", b"0  0 0"),
        _doc(b"1", b"0 0 0x"),
        _doc(b"1", b"256 0 0"),
        _doc(b"1", b"0 -1 0"),
        _doc(b"1", b"1 2"),
        _doc(b"1", b"100 100 1000"),
        HEADER + b"1\r\n0 0 0",
        HEADER + b"1\r\n0 \x000\r\n",
        b"",
    ],
)
def test_invalid_palettes_rejected(data):
    with pytest.raises(GfxError):
        parse_jasc_palette(data)


def test_missing_file(tmp_path):
    with pytest.raises(GfxError):
        read_jasc_palette(tmp_path / "missing.pal")