"""ABI encoding of elementary values and of component value trees.

Components are read through their ``component_type``, ``elementary_type``,
``m`` and ``n`` attributes; component values through their ``component``,
``children`` and ``value`` attributes.
"""

from __future__ import annotations

from decimal import Decimal, localcontext
from typing import Any

from ffabi.coercion import ABIError
from ffabi.elementary import BaseTypeName, ComponentType
from ffabi.signedint import check_signed_int_fits, serialize_int256_twos_complement

Encoded = tuple[bytes, bool]


def _wrong_type(expected: str, value: Any, desc: str) -> ABIError:
    return ABIError(
        f"Expected {expected} for ABI encoding of {desc}, "
        f"received {type(value).__name__}: {value!r}"
    )


def _too_large(bits: int, desc: str) -> ABIError:
    return ABIError(f"Number too large for a {bits} bit type at {desc}")


def encode_dynamic_bytes(value: bytes) -> Encoded:
    """Encode bytes as a uint256 length followed by the data padded to 32 bytes."""
    data = bytes(value)
    padding = -len(data) % 32
    return len(data).to_bytes(32, "big") + data + b"\x00" * padding, True


def encode_bytes(desc: str, component: Any, value: Any) -> Encoded:
    """Encode ``bytes``, ``bytes<M>`` or ``function`` values."""
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise _wrong_type("bytes", value, desc)
    data = bytes(value)
    fixed_length = component.m
    # "bytes" without a suffix has no M, which is what makes it dynamic
    if fixed_length == 0:
        return encode_dynamic_bytes(data)
    if len(data) < fixed_length or fixed_length > 32:
        raise ABIError(
            f"Insufficient data for {desc}: expected {fixed_length} bytes, received {len(data)}"
        )
    return data[:fixed_length].ljust(32, b"\x00"), False


def encode_string(desc: str, component: Any, value: Any) -> Encoded:
    """Encode a string as dynamic UTF-8 bytes."""
    if not isinstance(value, str):
        raise _wrong_type("str", value, desc)
    return encode_dynamic_bytes(value.encode("utf-8"))


def _require_int(value: Any, desc: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise _wrong_type("int", value, desc)
    return value


def encode_signed_integer(desc: str, component: Any, value: Any) -> Encoded:
    """Encode a signed integer as 32 bytes of two's complement."""
    i = _require_int(value, desc)
    if not check_signed_int_fits(i, component.m):
        raise _too_large(component.m, desc)
    return serialize_int256_twos_complement(i), False


def encode_unsigned_integer(desc: str, component: Any, value: Any) -> Encoded:
    """Encode a non-negative integer as a 32 byte big-endian word."""
    i = _require_int(value, desc)
    if i < 0:
        raise ABIError(
            f"Negative value supplied for unsigned type with {component.m} bits at {desc}"
        )
    if i.bit_length() > component.m:
        raise _too_large(component.m, desc)
    return i.to_bytes(32, "big"), False


def _encode_fixed(desc: str, component: Any, value: Any) -> Encoded:
    if not isinstance(value, Decimal) or not value.is_finite():
        raise _wrong_type("Decimal", value, desc)
    # Encoded as the integer |X| * 10**N
    with localcontext() as ctx:
        ctx.prec = 1000
        scaled = int(abs(value).scaleb(component.n))
    return encode_signed_integer(desc, component, scaled)


def encode_signed_fixed(desc: str, component: Any, value: Any) -> Encoded:
    """Encode a ``fixed<M>x<N>`` value."""
    return _encode_fixed(desc, component, value)


def encode_unsigned_fixed(desc: str, component: Any, value: Any) -> Encoded:
    """Encode a ``ufixed<M>x<N>`` value."""
    return _encode_fixed(desc, component, value)


_ENCODERS = {
    BaseTypeName.INT.value: encode_signed_integer,
    BaseTypeName.UINT.value: encode_unsigned_integer,
    BaseTypeName.ADDRESS.value: encode_unsigned_integer,
    BaseTypeName.BOOL.value: encode_unsigned_integer,
    BaseTypeName.FIXED.value: encode_signed_fixed,
    BaseTypeName.UFIXED.value: encode_unsigned_fixed,
    BaseTypeName.BYTES.value: encode_bytes,
    BaseTypeName.FUNCTION.value: encode_bytes,
    BaseTypeName.STRING.value: encode_string,
}


def encode_elementary(desc: str, component: Any, value: Any) -> Encoded:
    """Encode a value according to the elementary type of ``component``."""
    info = getattr(component, "elementary_type", None)
    if info is None:
        raise ABIError(f"Component at {desc} is not an elementary type")
    encoder = _ENCODERS.get(str(info.name))
    if encoder is None:
        raise ABIError(f"Unknown elementary type '{info.name}' at {desc}")
    return encoder(desc, component, value)


def _encode_children(value: Any, desc: str, known_dynamic: bool, include_len: bool) -> Encoded:
    children = list(value.children or [])
    parts = [encode_component_value(child, f"{desc}[{i}]") for i, child in enumerate(children)]

    head_len = sum(32 if dynamic else len(data) for data, dynamic in parts)
    is_dynamic = known_dynamic or any(dynamic for _, dynamic in parts)

    head = bytearray()
    tail = bytearray()
    for data, dynamic in parts:
        if dynamic:
            head += (head_len + len(tail)).to_bytes(32, "big")
            tail += data
        else:
            head += data

    prefix = len(children).to_bytes(32, "big") if include_len else b""
    return prefix + bytes(head) + bytes(tail), is_dynamic


def encode_component_value(value: Any, desc: str = "") -> Encoded:
    """Encode a component value tree, returning the data and whether it is dynamic."""
    component = getattr(value, "component", None)
    if component is None:
        raise ABIError("Bad ABI type component: nil")
    ctype = component.component_type
    if ctype == ComponentType.ELEMENTARY:
        return encode_elementary(desc, component, value.value)
    if ctype in (ComponentType.FIXED_ARRAY, ComponentType.TUPLE):
        return _encode_children(value, desc, known_dynamic=False, include_len=False)
    if ctype == ComponentType.DYNAMIC_ARRAY:
        return _encode_children(value, desc, known_dynamic=True, include_len=True)
    raise ABIError(f"Bad ABI type component: {ctype}")