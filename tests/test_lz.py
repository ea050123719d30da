import random

import pytest

from gbatools.lz import lz_compress, lz_decompress
from gbatools.util import GfxError


def test_single_byte_wire_format():
    # header (type 0x10, size 1), flag byte with no blocks, literal, padding
    assert lz_compress(b"A") == bytes([0x10, 1, 0, 0, 0x00, 0x41, 0, 0])


def test_header_records_size():
    data = bytes(range(200)) * 3
    out = lz_compress(data)
    assert out[0] == 0x10
    assert int.from_bytes(out[1:4], "little") == len(data)


@pytest.mark.parametrize(
    "data",
    [
        b"A",
        b"AB",
        b"\x00" * 1000,
        b"abcabcabcabcabcabc",
        bytes(range(256)) * 4,
        b"the quick brown fox jumps over the lazy dog " * 20,
    ],
)
def test_round_trip(data):
    compressed = lz_compress(data)
    assert len(compressed) % 4 == 0
    assert lz_decompress(compressed) == data


def test_round_trip_random():
    rng = random.Random(1234)
    data = bytes(rng.choice(b"abcd") for _ in range(3000))
    assert lz_decompress(lz_compress(data)) == data


def test_repetitive_data_shrinks():
    data = b"\x00" * 4096
    assert len(lz_compress(data)) < len(data) // 4


def test_never_uses_distance_one():
    # The first encoded block must refer back at least two bytes.
    compressed = lz_compress(b"\x07" * 50)
    assert compressed[4] & 0x80 == 0  # first token is a literal
    block_flags = compressed[4]
    tokens = compressed[5:]
    index = 0
    for bit in range(8):
        if block_flags & (0x80 >> bit):
            distance = (((tokens[index] & 0xF) << 8) | tokens[index + 1]) + 1
            assert distance >= 2
            index += 2
        else:
            index += 1


def test_compress_empty_raises():
    with pytest.raises(GfxError):
        lz_compress(b"")


def test_decompress_short_header_raises():
    with pytest.raises(GfxError):
        lz_decompress(b"\x10\x01")


def test_decompress_truncated_raises():
    compressed = lz_compress(bytes(range(64)))
    with pytest.raises(GfxError):
        lz_decompress(compressed[:10])


def test_decompress_reference_before_start_raises():
    # Block token referring before the start of output.
    with pytest.raises(GfxError):
        lz_decompress(bytes([0x10, 5, 0, 0, 0x80, 0x00, 0x00]))


def test_decompress_overflow_is_clipped():
    # Literal 'A' then a block of 3 with distance 1, but size only 2.
    out = lz_decompress(bytes([0x10, 2, 0, 0, 0x40, 0x41, 0x00, 0x00]))
    assert out == b"AA"