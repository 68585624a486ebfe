"""Two's complement helpers for 256-bit signed integers."""

from __future__ import annotations

_ONE_MORE_THAN_MAX_UINT256 = 1 << 256
_FULL_BITS_256 = _ONE_MORE_THAN_MAX_UINT256 - 1
_ONE_THEN_255_ZEROS = 1 << 255

_POS_MAX = {bits: (1 << (bits - 1)) - 1 for bits in range(8, 257, 8)}
_NEG_MAX = {bits: -(1 << (bits - 1)) for bits in range(8, 257, 8)}


def check_signed_int_fits(i: int, bit_len: int) -> bool:
    """Return True if ``i`` fits in a signed integer of ``bit_len`` bits.

    Only bit lengths that are multiples of 8 between 8 and 256 are
    supported; zero fits in anything.
    """
    if i == 0:
        return True
    if i > 0:
        limit = _POS_MAX.get(bit_len)
        return limit is not None and i <= limit
    limit = _NEG_MAX.get(bit_len)
    return limit is not None and i >= limit


def serialize_int256_twos_complement(i: int) -> bytes:
    """Serialize an integer as 32 bytes of big-endian two's complement."""
    return (i & _FULL_BITS_256).to_bytes(32, "big")


def parse_int256_twos_complement(b: bytes) -> int:
    """Parse big-endian two's complement bytes into a signed integer."""
    value = int.from_bytes(bytes(b), "big")
    if value < _ONE_THEN_255_ZEROS:
        return value
    return value - _ONE_MORE_THAN_MAX_UINT256