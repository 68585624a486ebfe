"""Coercion of loosely typed input values into the values ABI types need."""

from __future__ import annotations

import binascii
import math
import numbers
import re
from decimal import Decimal, InvalidOperation
from typing import Any


class ABIError(ValueError):
    """Raised when ABI definitions or values are invalid."""


_INT_LITERAL = re.compile(
    r"^[+-]?(?:0[xX][0-9a-fA-F_]+|0[oO][0-7_]+|0[bB][01_]+|0[0-7_]*|[1-9][0-9]*)$"
)
_DEC_FLOAT_LITERAL = re.compile(
    r"^[+-]?(?:[0-9][0-9_]*\.?[0-9_]*|\.[0-9][0-9_]*)(?:[eE][+-]?[0-9]+)?$"
)
_HEX_FLOAT_LITERAL = re.compile(
    r"^[+-]?0[xX](?:[0-9a-fA-F_]+\.?[0-9a-fA-F_]*|\.[0-9a-fA-F_]+)(?:[pP][+-]?[0-9]+)?$"
)
_PREFIXED_INT_LITERAL = re.compile(r"^[+-]?0(?:[oO][0-7_]+|[bB][01_]+)$")


def _as_string(value: Any) -> str | None:
    """Return a string for str values and objects with their own ``__str__``."""
    if isinstance(value, str):
        return str(value)
    if value is None or isinstance(
        value, (bytes, bytearray, memoryview, numbers.Number, list, tuple, dict, set)
    ):
        return None
    if type(value).__str__ is not object.__str__:
        return str(value)
    return None


def _parse_int_literal(text: str) -> int:
    """Parse an integer with base chosen by prefix (0x, 0o, 0b, 0 for octal)."""
    if not _INT_LITERAL.match(text):
        raise ValueError(text)
    negative = text.startswith("-")
    body = text.lstrip("+-").replace("_", "")
    lower = body.lower()
    if lower.startswith("0x"):
        result = int(lower[2:], 16)
    elif lower.startswith("0o"):
        result = int(lower[2:], 8)
    elif lower.startswith("0b"):
        result = int(lower[2:], 2)
    elif len(body) > 1 and body[0] == "0":
        result = int(body[1:], 8)
    else:
        result = int(body, 10)
    return -result if negative else result


def _parse_float_literal(text: str) -> Decimal:
    """Parse a decimal, hexadecimal, octal or binary numeric literal."""
    if _DEC_FLOAT_LITERAL.match(text):
        return Decimal(text.replace("_", ""))
    cleaned = text.replace("_", "")
    if _HEX_FLOAT_LITERAL.match(text):
        if "." in cleaned or "p" in cleaned.lower():
            return Decimal(repr(float.fromhex(cleaned)))
        return Decimal(int(cleaned, 16))
    if _PREFIXED_INT_LITERAL.match(text):
        return Decimal(_parse_int_literal(text))
    raise ValueError(text)


def get_integer(desc: str, value: Any) -> int:
    """Coerce strings, numbers and stringable objects into an integer."""
    if isinstance(value, str):
        try:
            return _parse_int_literal(value)
        except ValueError:
            raise ABIError(f"Invalid integer value '{value}' for {desc}") from None
    if isinstance(value, bool):
        raise ABIError(f"Invalid integer value {value!r} for {desc}")
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, (Decimal, numbers.Real)):
        try:
            return int(value)
        except (ValueError, OverflowError, InvalidOperation):
            raise ABIError(f"Invalid integer value {value!r} for {desc}") from None
    text = _as_string(value)
    if text is not None:
        return get_integer(desc, text)
    raise ABIError(f"Invalid integer value {value!r} for {desc}")


def get_float(desc: str, value: Any) -> Decimal:
    """Coerce strings, numbers and stringable objects into a Decimal."""
    if isinstance(value, str):
        try:
            result = _parse_float_literal(value)
        except (ValueError, InvalidOperation, OverflowError) as err:
            raise ABIError(f"Invalid float value '{value}' for {desc}") from err
        return result
    if isinstance(value, bool):
        raise ABIError(f"Invalid float value {value!r} for {desc}")
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ABIError(f"Invalid float value {value!r} for {desc}")
        return value
    if isinstance(value, numbers.Integral):
        return Decimal(int(value))
    if isinstance(value, numbers.Real):
        f = float(value)
        if not math.isfinite(f):
            raise ABIError(f"Invalid float value {value!r} for {desc}")
        return Decimal(repr(f))
    text = _as_string(value)
    if text is not None:
        return get_float(desc, text)
    raise ABIError(f"Invalid float value {value!r} for {desc}")


def get_bool_as_uint(desc: str, value: Any) -> int:
    """Coerce a bool, or a string compared case-insensitively to "true", into 1 or 0."""
    if isinstance(value, bool):
        return 1 if value else 0
    text = _as_string(value)
    if text is not None:
        return 1 if text.casefold() == "true" else 0
    raise ABIError(f"Invalid boolean value {value!r} for {desc}")


def get_string(desc: str, value: Any) -> str:
    """Return the string form of a str, bytes-like or stringable value."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    text = _as_string(value)
    if text is not None:
        return text
    raise ABIError(f"Invalid string value {value!r} for {desc}")


def get_bytes(desc: str, value: Any) -> bytes:
    """Return raw bytes, decoding hex strings with or without a 0x prefix."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    text = _as_string(value)
    if text is not None:
        hex_text = text[2:] if text.startswith("0x") else text
        try:
            return binascii.unhexlify(hex_text)
        except (binascii.Error, ValueError) as err:
            raise ABIError(f"Invalid hex value '{text}' for {desc}") from err
    raise ABIError(f"Invalid hex value {value!r} for {desc}")


def get_uint_bytes(desc: str, value: Any) -> int:
    """Read bytes as for :func:`get_bytes` and return them as a big-endian unsigned int."""
    return int.from_bytes(get_bytes(desc, value), "big")