"""4-bit delta compression of 8-bit PCM samples."""

from __future__ import annotations

DELTA_ENCODING_TABLE = (
    0, 1, 4, 9, 16, 25, 36, 49,
    -64, -49, -36, -25, -16, -9, -4, -1,
)

_PAIRS_PER_BLOCK = 31


def get_delta_index(sample: int, prev_sample: int) -> int:
    """Return the table index whose delta from ``prev_sample`` lands closest to ``sample``."""
    best_error = None
    best_index = -1
    for index, delta in enumerate(DELTA_ENCODING_TABLE):
        new_sample = (prev_sample + delta) & 0xFF
        error = abs(sample - new_sample)
        if best_error is None or error < best_error:
            best_error = error
            best_index = index
    return best_index


def delta_compress(pcm: bytes) -> bytes:
    """Delta-compress samples in blocks of 64 (one raw byte, then nibbles).

    A lone trailing nibble at the very end of the data is not emitted.
    """
    samples = iter(bytes(pcm))
    out = bytearray()

    def encode(base: int) -> tuple[int, int] | None:
        sample = next(samples, None)
        if sample is None:
            return None
        index = get_delta_index(sample, base)
        return index, (base + DELTA_ENCODING_TABLE[index]) & 0xFF

    while True:
        base = next(samples, None)
        if base is None:
            break
        out.append(base)

        step = encode(base)
        if step is None:
            break
        index, base = step
        out.append(index)

        for _ in range(_PAIRS_PER_BLOCK):
            high = encode(base)
            if high is None:
                break
            high_index, base = high
            low = encode(base)
            if low is None:
                break
            low_index, base = low
            out.append((high_index << 4) | low_index)

    return bytes(out)


def delta_decompress(delta: bytes, expected_length: int) -> bytes:
    """Expand delta-compressed data into at most ``expected_length`` samples."""
    data = bytes(delta)
    size = len(data)
    out = bytearray()
    pos = 0

    def emit(base: int, nibble: int) -> int:
        base = (base + DELTA_ENCODING_TABLE[nibble]) & 0xFF
        out.append(base)
        return base

    while pos < size:
        base = data[pos]
        pos += 1
        out.append(base)
        if pos >= size or len(out) >= expected_length:
            break

        base = emit(base, data[pos] & 0xF)
        pos += 1
        if pos >= size or len(out) >= expected_length:
            break

        for _ in range(_PAIRS_PER_BLOCK):
            base = emit(base, (data[pos] >> 4) & 0xF)
            if len(out) >= expected_length:
                break
            base = emit(base, data[pos] & 0xF)
            pos += 1
            if pos >= size or len(out) >= expected_length:
                break

        if len(out) >= expected_length:
            break

    return bytes(out)