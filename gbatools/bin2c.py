"""Render a binary file as a C array definition."""

from __future__ import annotations

import sys
from collections.abc import Sequence

from .util import GfxError, parse_number, read_whole_file

USAGE = "Usage: bin2c INPUT_FILE VAR_NAME [OPTIONS...]"
_VALID_SIZES = (1, 2, 4)


def extract_data(buffer: bytes, offset: int, size: int) -> int:
    """Read a little-endian value of ``size`` bytes; 4-byte values are signed."""
    if size not in _VALID_SIZES:
        raise ValueError("Invalid size passed to ExtractData.")
    chunk = bytes(buffer[offset:offset + size])
    if len(chunk) != size:
        raise ValueError(f"not enough data at offset {offset}")
    return int.from_bytes(chunk, "little", signed=size == 4)


def _pad(text: str, width: int) -> str:
    return text.ljust(-width) if width < 0 else text.rjust(width)


def _format_value(value: int, pad: int, is_signed: bool, is_decimal: bool) -> str:
    unsigned = value & 0xFFFFFFFF
    if is_decimal:
        if is_signed:
            return _pad(str(value), pad)
        return _pad(str(unsigned), pad) + "u"
    hex_text = f"{unsigned:#x}" if unsigned else "0"
    return _pad(hex_text, pad) + "u"


def format_c_array(
    data: bytes,
    var_name: str,
    col: int = 1,
    pad: int = 0,
    size: int = 1,
    is_signed: bool = False,
    is_static: bool = False,
    is_decimal: bool = False,
) -> str:
    """Return C source defining ``var_name`` as a const array of ``data``."""
    if size not in _VALID_SIZES:
        raise ValueError("Size must be 1, 2, or 4.")
    if col < 1:
        raise ValueError("Column count must be positive.")
    if len(data) & (size - 1):
        raise ValueError(f"Size {size} doesn't evenly divide file size {len(data)}.")

    parts = ["// Generated file. Do not edit.\n\n"]
    if is_static:
        parts.append("static ")
    parts.append("const ")
    parts.append(f"{'s' if is_signed else 'u'}{8 * size} ")
    parts.append(f"{var_name}[] =\n{{")

    for index, offset in enumerate(range(0, len(data), size)):
        if index % col == 0:
            parts.append("\n    ")
        value = extract_data(data, offset, size)
        parts.append(_format_value(value, pad, is_signed, is_decimal) + ", ")

    parts.append("\n};\n")
    return "".join(parts)


def _atoi(text: str) -> int:
    try:
        value, _ = parse_number(text, 10)
    except ValueError:
        return 0
    return value


def _run(argv: Sequence[str]) -> str:
    if len(argv) < 2:
        raise ValueError(USAGE)

    input_path, var_name, *options = argv
    data = read_whole_file(input_path)
    settings = {
        "col": 1,
        "pad": 0,
        "size": 1,
        "is_signed": False,
        "is_static": False,
        "is_decimal": False,
    }

    it = iter(options)
    for option in it:
        if option in ("-col", "-pad", "-size"):
            argument = next(it, None)
            if argument is None:
                raise ValueError(f"Missing argument after '{option}'.")
            value = _atoi(argument)
            if option == "-size" and value not in _VALID_SIZES:
                raise ValueError("Size must be 1, 2, or 4.")
            settings[option[1:]] = value
        elif option == "-signed":
            settings["is_signed"] = True
            settings["is_decimal"] = True
        elif option == "-static":
            settings["is_static"] = True
        elif option == "-decimal":
            settings["is_decimal"] = True
        else:
            raise ValueError(f"Unrecognized option '{option}'.")

    return format_c_array(data, var_name, **settings)


def main(argv: Sequence[str] | None = None) -> int:
    """Print the C array for a file; return 0 on success and 1 on error."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        text = _run(list(argv))
    except (ValueError, GfxError) as exc:
        print(exc, file=sys.stderr)
        return 1
    sys.stdout.write(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())