"""GBA BIOS-compatible LZ77 compression (type 0x10)."""

from __future__ import annotations

import bisect
import logging
from collections import defaultdict

from .util import GfxError

logger = logging.getLogger(__name__)

_MIN_DISTANCE = 2  # keeps the output safe for LZ77UnCompVram
_MAX_DISTANCE = 0x1000
_MAX_BLOCK = 18
_MIN_BLOCK = 3


def lz_decompress(data: bytes) -> bytes:
    """Decompress LZ77 data whose 4-byte header gives the output size."""
    src = bytes(data)
    src_size = len(src)
    if src_size < 4:
        raise GfxError("Fatal error while decompressing LZ file.")

    dest_size = int.from_bytes(src[1:4], "little")
    dest = bytearray()
    pos = 4

    while True:
        if pos >= src_size:
            raise GfxError("Fatal error while decompressing LZ file.")
        flags = src[pos]
        pos += 1

        for _ in range(8):
            if flags & 0x80:
                if pos + 1 >= src_size:
                    raise GfxError("Fatal error while decompressing LZ file.")
                block_size = (src[pos] >> 4) + 3
                distance = (((src[pos] & 0xF) << 8) | src[pos + 1]) + 1
                pos += 2
                block_pos = len(dest) - distance

                if len(dest) + block_size > dest_size:
                    block_size = dest_size - len(dest)
                    logger.warning("Destination buffer overflow.")

                if block_pos < 0:
                    raise GfxError("Fatal error while decompressing LZ file.")

                for offset in range(block_size):
                    dest.append(dest[block_pos + offset])
            else:
                if pos >= src_size or len(dest) >= dest_size:
                    raise GfxError("Fatal error while decompressing LZ file.")
                dest.append(src[pos])
                pos += 1

            if len(dest) == dest_size:
                return bytes(dest)

            flags = (flags << 1) & 0xFF


def _best_match(src: bytes, pos: int, positions: list[int]) -> tuple[int, int]:
    """Return (distance, size) of the closest longest match of at least 3 bytes."""
    limit = min(_MAX_BLOCK, len(src) - pos)
    lo = bisect.bisect_left(positions, pos - _MAX_DISTANCE)
    hi = bisect.bisect_right(positions, pos - _MIN_DISTANCE)
    best_distance = 0
    best_size = 0
    for start in reversed(positions[lo:hi]):
        size = 0
        while size < limit and src[start + size] == src[pos + size]:
            size += 1
        if size > best_size:
            best_distance = pos - start
            best_size = size
            if size == _MAX_BLOCK:
                break
    return best_distance, best_size


def lz_compress(data: bytes) -> bytes:
    """Compress data with LZ77, padding the result to a multiple of 4 bytes."""
    src = bytes(data)
    src_size = len(src)
    if src_size <= 0:
        raise GfxError("Fatal error while compressing LZ file.")

    prefix_positions: dict[bytes, list[int]] = defaultdict(list)
    for index in range(src_size - _MIN_BLOCK + 1):
        prefix_positions[src[index:index + _MIN_BLOCK]].append(index)

    dest = bytearray([0x10, src_size & 0xFF, (src_size >> 8) & 0xFF, (src_size >> 16) & 0xFF])
    pos = 0

    while True:
        flags_index = len(dest)
        dest.append(0)

        for bit in range(8):
            best_distance, best_size = 0, 0
            if src_size - pos >= _MIN_BLOCK:
                candidates = prefix_positions.get(src[pos:pos + _MIN_BLOCK], [])
                best_distance, best_size = _best_match(src, pos, candidates)

            if best_size >= _MIN_BLOCK:
                dest[flags_index] |= 0x80 >> bit
                pos += best_size
                encoded_size = best_size - 3
                encoded_distance = best_distance - 1
                dest.append(((encoded_size << 4) | (encoded_distance >> 8)) & 0xFF)
                dest.append(encoded_distance & 0xFF)
            else:
                dest.append(src[pos])
                pos += 1

            if pos == src_size:
                dest.extend(bytes(-len(dest) % 4))
                return bytes(dest)