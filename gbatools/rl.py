"""GBA BIOS-compatible run-length compression (type 0x30)."""

from __future__ import annotations

from .util import GfxError

_MAX_LITERAL = 0x7F + 1
_MAX_RUN = 0x7F + 3


def rl_decompress(data: bytes) -> bytes:
    """Decompress run-length data whose 4-byte header gives the output size."""
    src = bytes(data)
    src_size = len(src)
    if src_size < 4:
        raise GfxError("Fatal error while decompressing RL file.")

    dest_size = int.from_bytes(src[1:4], "little")
    dest = bytearray()
    pos = 4

    while True:
        if pos >= src_size:
            raise GfxError("Fatal error while decompressing RL file.")
        flags = src[pos]
        pos += 1

        if flags & 0x80:
            length = (flags & 0x7F) + 3
            if pos >= src_size or len(dest) + length > dest_size:
                raise GfxError("Fatal error while decompressing RL file.")
            dest.extend(src[pos:pos + 1] * length)
            pos += 1
        else:
            length = (flags & 0x7F) + 1
            if pos + length > src_size or len(dest) + length > dest_size:
                raise GfxError("Fatal error while decompressing RL file.")
            dest.extend(src[pos:pos + length])
            pos += length

        if len(dest) == dest_size:
            return bytes(dest)


def _run_starts(src: bytes, pos: int) -> bool:
    return pos + 2 < len(src) and src[pos] == src[pos + 1] == src[pos + 2]


def rl_compress(data: bytes) -> bytes:
    """Run-length compress data, padding the result to a multiple of 4 bytes."""
    src = bytes(data)
    src_size = len(src)
    if src_size <= 0:
        raise GfxError("Fatal error while compressing RL file.")

    dest = bytearray([0x30, src_size & 0xFF, (src_size >> 8) & 0xFF, (src_size >> 16) & 0xFF])
    pos = 0

    while True:
        compress = False
        literal_start = pos
        while pos < src_size and pos - literal_start < _MAX_LITERAL:
            compress = _run_starts(src, pos)
            if compress:
                break
            pos += 1

        literal_length = pos - literal_start
        if literal_length > 0:
            dest.append(literal_length - 1)
            dest.extend(src[literal_start:pos])

        if compress:
            value = src[pos]
            run_length = 0
            while (
                run_length < _MAX_RUN
                and pos + run_length < src_size
                and src[pos + run_length] == value
            ):
                run_length += 1
            dest.append(0x80 | (run_length - 3))
            dest.append(value)
            pos += run_length

        if pos == src_size:
            dest.extend(bytes(-len(dest) % 4))
            return bytes(dest)