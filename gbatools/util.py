"""Shared helpers: number parsing, file extensions and whole-file I/O."""

from __future__ import annotations

import os
from typing import Union

PathType = Union[str, "os.PathLike[str]"]

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1

_WHITESPACE = " \t\n\v\f\r"
_DIGIT_VALUES = {c: i for i, c in enumerate("0123456789abcdefghijklmnopqrstuvwxyz")}


class GfxError(Exception):
    """Raised when a graphics or compression operation cannot be completed."""


def _digit_value(char: str) -> int | None:
    return _DIGIT_VALUES.get(char.lower())


def parse_number(text: str, radix: int = 10) -> tuple[int, int]:
    """Parse a leading integer from ``text`` the way ``strtol`` does.

    Returns ``(value, end)`` where ``end`` is the index just past the number.
    Raises ValueError if no number is present or it does not fit a 32-bit int.
    """
    if radix != 0 and not 2 <= radix <= 36:
        raise ValueError(f"invalid radix {radix}")

    length = len(text)
    pos = 0
    while pos < length and text[pos] in _WHITESPACE:
        pos += 1

    negative = False
    if pos < length and text[pos] in "+-":
        negative = text[pos] == "-"
        pos += 1

    has_hex_prefix = (
        text[pos:pos + 2].lower() == "0x"
        and pos + 2 < length
        and (_digit_value(text[pos + 2]) or 0) < 16
        and _digit_value(text[pos + 2]) is not None
    )
    if radix in (0, 16) and has_hex_prefix:
        pos += 2
        radix = 16
    elif radix == 0:
        radix = 8 if text[pos:pos + 1] == "0" else 10

    start = pos
    value = 0
    while pos < length:
        digit = _digit_value(text[pos])
        if digit is None or digit >= radix:
            break
        value = value * radix + digit
        pos += 1

    if pos == start:
        raise ValueError(f"{text!r} is not a number")

    if negative:
        value = -value
    if not INT_MIN <= value <= INT_MAX:
        raise ValueError(f"{text[:pos]!r} is out of range")
    return value, pos


def get_file_extension(path: PathType) -> str | None:
    """Return the text after the last '.', or None if there is none.

    A dot at the very start of the path does not count, and an empty
    extension is treated as no extension.
    """
    path = os.fspath(path)
    index = path.rfind(".")
    if index <= 0:
        return None
    extension = path[index + 1:]
    return extension or None


def read_whole_file(path: PathType) -> bytes:
    """Read and return the entire contents of a non-empty file."""
    try:
        with open(path, "rb") as fp:
            data = fp.read()
    except OSError as exc:
        raise GfxError(f'Failed to open "{os.fspath(path)}" for reading.') from exc
    if not data:
        raise GfxError(f'Failed to read "{os.fspath(path)}".')
    return data


def read_whole_file_zero_padded(path: PathType, pad_amount: int) -> bytes:
    """Read a whole file and append ``pad_amount`` zero bytes."""
    if pad_amount < 0:
        raise ValueError("pad amount must not be negative")
    return read_whole_file(path) + bytes(pad_amount)


def write_whole_file(path: PathType, data: bytes) -> None:
    """Write ``data`` to ``path``, replacing any existing file."""
    try:
        with open(path, "wb") as fp:
            if not data:
                raise GfxError(f'Failed to write to "{os.fspath(path)}".')
            fp.write(data)
    except OSError as exc:
        raise GfxError(f'Failed to open "{os.fspath(path)}" for writing.') from exc