import pytest

from ffabi.signedint import (
    check_signed_int_fits,
    parse_int256_twos_complement,
    serialize_int256_twos_complement,
)


def test_round_trip_small_negative():
    b = serialize_int256_twos_complement(-12345)
    assert len(b) == 32
    assert parse_int256_twos_complement(b) == -12345


def test_round_trip_most_negative():
    i = -(2**255)
    b = serialize_int256_twos_complement(i)
    assert b.hex() == "80" + "00" * 31
    assert parse_int256_twos_complement(b) == i


def test_round_trip_most_positive():
    i = 2**255 - 1
    b = serialize_int256_twos_complement(i)
    assert b.hex() == "7f" + "ff" * 31
    assert parse_int256_twos_complement(b) == i


def test_minus_one_is_all_ones():
    assert serialize_int256_twos_complement(-1) == b"\xff" * 32


def test_positive_parse():
    assert parse_int256_twos_complement(bytes.fromhex("3039")) == 12345


@pytest.mark.parametrize(
    "value, bits, expected",
    [
        (0, 0, True),
        (1, 0, False),
        (-32768, 16, True),
        (-32769, 16, False),
        (32767, 16, True),
        (32768, 16, False),
        (-1, 7, False),
        (2**255 - 1, 256, True),
        (2**255, 256, False),
    ],
)
def test_check_signed_int_fits(value, bits, expected):
    assert check_signed_int_fits(value, bits) is expected