import pytest

from gbatools.bin2c import extract_data, format_c_array, main

HEADER = "// Generated file. Do not edit.\n\n"


def _entries(text):
    body = text.split("{", 1)[1].rsplit("}", 1)[0]
    return [item.strip() for item in body.split(",") if item.strip()]


def test_default_hex_output():
    text = format_c_array(b"\x01\x00\xff", "gData")
    assert text == (
        HEADER
        + "const u8 gData[] =\n{"
        + "\n    0x1u, "
        + "\n    0u, "
        + "\n    0xffu, "
        + "\n};\n"
    )


def test_extract_data_little_endian():
    assert extract_data(b"\x34\x12", 0, 2) == 0x1234
    assert extract_data(b"\x00\x7f", 1, 1) == 0x7F


def test_extract_data_four_bytes_is_signed():
    assert extract_data(b"\xff\xff\xff\xff", 0, 4) == -1


def test_extract_data_invalid_size():
    with pytest.raises(ValueError):
        extract_data(b"\x00\x00\x00", 0, 3)


def test_signed_four_byte_value_prints_negative():
    text = format_c_array(b"\xff\xff\xff\xff", "gWord", size=4, is_signed=True, is_decimal=True)
    assert "const s32 gWord[] =" in text
    assert _entries(text) == ["-1"]


def test_unsigned_decimal_four_byte_value_prints_unsigned():
    text = format_c_array(b"\xff\xff\xff\xff", "gWord", size=4, is_decimal=True)
    assert _entries(text) == ["4294967295u"]


def test_static_prefix_and_width():
    text = format_c_array(b"\x00\x00", "gHalf", size=2, is_static=True)
    assert text.startswith(HEADER + "static const u16 gHalf[] =")


def test_columns_group_entries_per_line():
    data = bytes(range(10))
    text = format_c_array(data, "gBytes", col=4)
    lines = [line for line in text.splitlines() if line.startswith("    ")]
    assert len(lines) == 3
    assert len(_entries(text)) == len(data)


def test_padding_right_aligns_numbers():
    text = format_c_array(bytes([1, 200]), "gPad", pad=4, is_decimal=True)
    for line in text.splitlines():
        if line.startswith("    "):
            number = line[4:].split("u,")[0]
            assert len(number) == 4
            assert number.strip().isdigit()


def test_negative_padding_left_aligns():
    text = format_c_array(bytes([5]), "gPad", pad=-3, is_decimal=True)
    line = [line for line in text.splitlines() if line.startswith("    ")][0]
    assert line[4:].startswith("5  u")


def test_size_must_divide_data():
    with pytest.raises(ValueError, match="evenly divide"):
        format_c_array(b"\x00\x00\x00", "gOdd", size=2)


def test_invalid_size_rejected():
    with pytest.raises(ValueError):
        format_c_array(b"\x00\x00\x00", "gBad", size=3)


def test_main_prints_array(tmp_path, capsys):
    source = tmp_path / "data.bin"
    source.write_bytes(bytes([1, 2, 3, 4]))
    assert main([str(source), "gData", "-col", "2", "-decimal"]) == 0
    out = capsys.readouterr().out
    assert out == format_c_array(bytes([1, 2, 3, 4]), "gData", col=2, is_decimal=True)


def test_main_signed_option_implies_decimal(tmp_path, capsys):
    source = tmp_path / "data.bin"
    source.write_bytes(b"\xfe\xff\xff\xff")
    assert main([str(source), "gData", "-size", "4", "-signed"]) == 0
    out = capsys.readouterr().out
    assert _entries(out) == ["-2"]


def test_main_unknown_option(tmp_path, capsys):
    source = tmp_path / "data.bin"
    source.write_bytes(b"\x00")
    assert main([str(source), "gData", "-bogus"]) == 1
    assert "Unrecognized option '-bogus'." in capsys.readouterr().err


def test_main_missing_option_argument(tmp_path, capsys):
    source = tmp_path / "data.bin"
    source.write_bytes(b"\x00")
    assert main([str(source), "gData", "-col"]) == 1
    assert "Missing argument after '-col'." in capsys.readouterr().err


def test_main_bad_size(tmp_path, capsys):
    source = tmp_path / "data.bin"
    source.write_bytes(b"\x00\x00\x00\x00")
    assert main([str(source), "gData", "-size", "3"]) == 1
    assert "Size must be 1, 2, or 4." in capsys.readouterr().err


def test_main_usage(capsys):
    assert main(["only_one"]) == 1
    assert "Usage: bin2c" in capsys.readouterr().err


def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.bin"), "gData"]) == 1
    assert "Failed to open" in capsys.readouterr().err