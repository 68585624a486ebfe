from decimal import Decimal

import pytest

from ffabi.coercion import (
    ABIError,
    get_bool_as_uint,
    get_bytes,
    get_float,
    get_integer,
    get_string,
    get_uint_bytes,
)


class CustomStr(str):
    pass


class CustomInt(int):
    pass


class CustomBytes(bytes):
    pass


class Stringable:
    def __init__(self, s):
        self.s = s

    def __str__(self):
        return self.s


@pytest.mark.parametrize(
    "value, expected",
    [
        ("-12345", -12345),
        ("0xfeedbeef", 4276993775),
        ("-0xfeedbeef", -4276993775),
        (-12345, -12345),
        (12345, 12345),
        (32, 32),
        (12345.0, 12345),
        (-12345.7, -12345),
        (Decimal("-12345"), -12345),
        (Stringable("-12345"), -12345),
        (CustomStr("-12345"), -12345),
        (CustomInt(-12345), -12345),
        ("012", 10),
        ("0b101", 5),
    ],
)
def test_get_integer(value, expected):
    assert get_integer("ut", value) == expected


@pytest.mark.parametrize("value", ["wrong", ["wrong"], None, True, "", "08", float("nan")])
def test_get_integer_invalid(value):
    with pytest.raises(ABIError, match="ut"):
        get_integer("ut", value)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("-1.2345", "-1.2345"),
        ("0xfeedbeef", "4276993775"),
        ("-0xfeedbeef", "-4276993775"),
        (-12345, "-12345"),
        (12345, "12345"),
        (32, "32"),
        (-1.2345, "-1.2345"),
        (Decimal("-12345"), "-12345"),
        (CustomStr("-12345"), "-12345"),
        (CustomInt(-12345), "-12345"),
        (Stringable("1.5e3"), "1.5E+3"),
    ],
)
def test_get_float(value, expected):
    assert str(get_float("ut", value)) == expected


@pytest.mark.parametrize("value", ["wrong", ["wrong"], None, False, "nan"])
def test_get_float_invalid(value):
    with pytest.raises(ABIError, match="ut"):
        get_float("ut", value)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("true", 1),
        ("TRUE", 1),
        ("false", 0),
        (True, 1),
        (False, 0),
        (CustomStr("true"), 1),
        (Stringable("yes"), 0),
    ],
)
def test_get_bool(value, expected):
    assert get_bool_as_uint("ut", value) == expected


@pytest.mark.parametrize("value", [-12345, [True], None])
def test_get_bool_invalid(value):
    with pytest.raises(ABIError, match="ut"):
        get_bool_as_uint("ut", value)


@pytest.mark.parametrize(
    "value",
    [
        "test data",
        b"test data",
        bytearray(b"test data"),
        CustomStr("test data"),
        Stringable("test data"),
    ],
)
def test_get_string(value):
    assert get_string("ut", value) == "test data"


@pytest.mark.parametrize("value", [-12345, ["wrong"], None, True])
def test_get_string_invalid(value):
    with pytest.raises(ABIError, match="ut"):
        get_string("ut", value)


@pytest.mark.parametrize(
    "value",
    [
        "0xfeedbeef",
        "feedbeef",
        "FEEDBEEF",
        b"\xfe\xed\xbe\xef",
        bytearray(b"\xfe\xed\xbe\xef"),
        CustomBytes(b"\xfe\xed\xbe\xef"),
        CustomStr("0xfeedbeef"),
    ],
)
def test_get_bytes(value):
    assert get_bytes("ut", value) == b"\xfe\xed\xbe\xef"


def test_get_bytes_empty_hex():
    assert get_bytes("ut", "0x") == b""


@pytest.mark.parametrize("value", [-12345, ["wrong"], "wrong", None, "abc", "fe ed"])
def test_get_bytes_invalid(value):
    with pytest.raises(ABIError, match="ut"):
        get_bytes("ut", value)


def test_get_uint_bytes():
    assert get_uint_bytes("ut", "0xfeedbeef") == 0xFEEDBEEF


def test_get_uint_bytes_invalid():
    with pytest.raises(ABIError, match="ut"):
        get_uint_bytes("ut", None)