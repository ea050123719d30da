import pytest

from gbatools.util import (
    GfxError,
    get_file_extension,
    parse_number,
    read_whole_file,
    read_whole_file_zero_padded,
    write_whole_file,
)


def test_parse_simple_decimal():
    assert parse_number("123", 10) == (123, 3)


def test_parse_stops_at_non_digit_and_skips_whitespace():
    assert parse_number("  -42x", 10) == (-42, 5)


def test_parse_plus_sign():
    assert parse_number("+7", 10) == (7, 2)


def test_parse_hex_prefix():
    assert parse_number("0x1F", 16) == (31, 4)


def test_parse_hex_prefix_without_digit_stops_after_zero():
    assert parse_number("0xg", 16) == (0, 1)


def test_parse_radix_zero_octal():
    assert parse_number("017", 0) == (15, 3)


def test_parse_red_green_blue_line():
    value, end = parse_number("255 128 0", 10)
    assert value == 255
    assert "255 128 0"[end] == " "
    green, end2 = parse_number("255 128 0"[end + 1:], 10)
    assert green == 128


@pytest.mark.parametrize("text", ["", "abc", "   ", "-", "x1"])
def test_parse_not_a_number(text):
    with pytest.raises(ValueError):
        parse_number(text, 10)


def test_parse_int_limits():
    assert parse_number("2147483647", 10)[0] == 2**31 - 1
    assert parse_number("-2147483648", 10)[0] == -(2**31)
    with pytest.raises(ValueError):
        parse_number("2147483648", 10)
    with pytest.raises(ValueError):
        parse_number("-2147483649", 10)


def test_parse_invalid_radix():
    with pytest.raises(ValueError):
        parse_number("1", 1)


@pytest.mark.parametrize(
    "path, expected",
    [
        ("image.4bpp", "4bpp"),
        ("dir/file.tar.lz", "lz"),
        ("noext", None),
        (".hidden", None),
        ("trailing.", None),
    ],
)
def test_get_file_extension(path, expected):
    assert get_file_extension(path) == expected


def test_write_then_read_round_trip(tmp_path):
    target = tmp_path / "data.bin"
    payload = bytes(range(256))
    write_whole_file(target, payload)
    assert read_whole_file(target) == payload


def test_read_zero_padded(tmp_path):
    target = tmp_path / "data.bin"
    write_whole_file(target, b"abc")
    assert read_whole_file_zero_padded(target, 4) == b"abc\0\0\0\0"


def test_read_missing_file(tmp_path):
    with pytest.raises(GfxError):
        read_whole_file(tmp_path / "missing.bin")


def test_read_empty_file(tmp_path):
    target = tmp_path / "empty.bin"
    target.write_bytes(b"")
    with pytest.raises(GfxError):
        read_whole_file(target)


def test_write_into_missing_directory(tmp_path):
    with pytest.raises(GfxError):
        write_whole_file(tmp_path / "nope" / "out.bin", b"x")