import math

import pytest

from gbatools.extended import read_extended, write_extended


def test_zero_is_all_zero_bytes():
    assert write_extended(0.0) == bytes(10)
    assert read_extended(bytes(10)) == 0.0


def test_one_encoding():
    assert write_extended(1.0) == bytes([0x3F, 0xFF, 0x80, 0, 0, 0, 0, 0, 0, 0])


def test_common_sample_rate_encoding():
    assert write_extended(44100.0) == bytes([0x40, 0x0E, 0xAC, 0x44, 0, 0, 0, 0, 0, 0])


@pytest.mark.parametrize("value", [1.0, 2.0, 8000.0, 13379.0, 44100.0, 3.25, math.pi, 1e300, 1e-300])
def test_round_trip(value):
    encoded = write_extended(value)
    assert len(encoded) == 10
    assert read_extended(encoded) == value


def test_negative_sets_sign_bit_only():
    positive = write_extended(13379.0)
    negative = write_extended(-13379.0)
    assert negative[0] == positive[0] | 0x80
    assert negative[1:] == positive[1:]
    assert read_extended(negative) == -13379.0


def test_negative_zero_decodes_negative():
    data = bytes([0x80]) + bytes(9)
    result = read_extended(data)
    assert result == 0.0
    assert math.copysign(1.0, result) == -1.0


def test_maximum_exponent_reads_as_infinity():
    assert read_extended(bytes([0x7F, 0xFF]) + bytes(8)) == math.inf
    assert read_extended(bytes([0xFF, 0xFF]) + bytes(8)) == -math.inf
    assert read_extended(bytes([0x7F, 0xFF, 0x80]) + bytes(7)) == math.inf


def test_infinity_round_trip():
    assert read_extended(write_extended(math.inf)) == math.inf
    assert read_extended(write_extended(-math.inf)) == -math.inf


def test_zero_binary_exponent_saturates():
    encoded = write_extended(0.75)
    assert encoded == bytes([0x7F, 0xFF, 0x80, 0, 0, 0, 0, 0, 0, 0])
    assert read_extended(encoded) == math.inf


def test_short_input_rejected():
    with pytest.raises(ValueError):
        read_extended(bytes(9))