"""80-bit IEEE 754 extended precision numbers, as stored in AIFF headers."""

from __future__ import annotations

import math

_BIAS = 16383
_MAX_EXPONENT = 32767
EXTENDED_SIZE = 10


def _ldexp(mantissa: float, exponent: int) -> float:
    try:
        return math.ldexp(mantissa, exponent)
    except OverflowError:
        return math.inf


def write_extended(value: float) -> bytes:
    """Encode ``value`` as 10 big-endian bytes of extended precision.

    Values whose binary exponent is zero (magnitudes in [0.5, 1)), as well as
    infinities and NaNs, are stored with the maximum exponent.
    """
    if value == 0.0:
        return bytes(EXTENDED_SIZE)

    sign = 0
    if value < 0.0:
        value = -value
        sign = 1

    fraction, exponent = math.frexp(value)

    if exponent == 0 or exponent > 16384:
        low, high = (0, 0) if exponent > 16384 else (0x80000000, 0)
        exponent = _MAX_EXPONENT
    else:
        fraction = math.ldexp(fraction, 32)
        whole = math.floor(fraction)
        low = int(whole)
        fraction -= whole
        high = int(math.floor(math.ldexp(fraction, 32)))

        # Exponents below the normal range are denormalised at -16382.
        if exponent < -16382:
            shift = -exponent - 16382
            high = ((high >> shift) | (low << (32 - shift))) & 0xFFFFFFFF
            low >>= shift
            exponent = -16382
        exponent += _BIAS - 1

    head = bytes([((sign << 7) | (exponent >> 8)) & 0xFF, exponent & 0xFF])
    return head + (low & 0xFFFFFFFF).to_bytes(4, "big") + (high & 0xFFFFFFFF).to_bytes(4, "big")


def read_extended(data: bytes) -> float:
    """Decode the first 10 bytes of ``data`` as an extended precision number.

    The maximum exponent decodes to infinity whatever the mantissa holds.
    """
    if len(data) < EXTENDED_SIZE:
        raise ValueError(f"need {EXTENDED_SIZE} bytes, got {len(data)}")

    sign = data[0] >> 7
    exponent = ((data[0] & 0x7F) << 8) | data[1]
    low = int.from_bytes(data[2:6], "big")
    high = int.from_bytes(data[6:10], "big")

    if exponent == 0 and low == 0 and high == 0:
        return -0.0 if sign else 0.0

    if exponent == _MAX_EXPONENT:
        return -math.inf if sign else math.inf

    exponent -= _BIAS
    result = _ldexp(float(low), -31 + exponent) + _ldexp(float(high), -63 + exponent)
    return -result if sign else result