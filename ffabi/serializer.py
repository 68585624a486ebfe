"""Serialization of parsed ABI value trees into JSON-friendly structures."""

from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal, localcontext
from enum import Enum
from typing import Any, Callable

from ffabi.coercion import ABIError
from ffabi.elementary import BaseTypeName, ComponentType

_MAX_SAFE_JSON_NUMBER = 9007199254740991
_MIN_SAFE_JSON_NUMBER = -9007199254740991
_FLOAT_TEXT_PRECISION = 10


class FormattingMode(Enum):
    """How function parameters and child tuples are laid out."""

    OBJECTS = 0
    FLAT_ARRAYS = 1
    SELF_DESCRIBING_ARRAYS = 2


IntSerializer = Callable[[int], Any]
FloatSerializer = Callable[[Decimal], Any]
ByteSerializer = Callable[[bytes], Any]
DefaultNameGenerator = Callable[[int], str]


def _as_decimal(f: Any) -> Decimal:
    return f if isinstance(f, Decimal) else Decimal(str(f))


def _float_text(f: Any) -> str:
    """Format a number with ten significant digits, %g style."""
    d = _as_decimal(f)
    if d.is_zero():
        return "-0" if d.is_signed() else "0"
    with localcontext() as ctx:
        ctx.prec = _FLOAT_TEXT_PRECISION
        ctx.rounding = ROUND_HALF_EVEN
        rounded = d.normalize()
    sign, digits, exponent = rounded.as_tuple()
    leading_exp = len(digits) - 1 + exponent
    if leading_exp < -4 or leading_exp >= _FLOAT_TEXT_PRECISION:
        mantissa = str(digits[0])
        rest = "".join(str(digit) for digit in digits[1:])
        if rest:
            mantissa += "." + rest
        exp_sign = "+" if leading_exp >= 0 else "-"
        return f"{'-' if sign else ''}{mantissa}e{exp_sign}{abs(leading_exp):02d}"
    return format(rounded, "f")


def base10_string_int_serializer(i: int) -> str:
    """Serialize an integer as a decimal string."""
    return str(i)


def hex_int_serializer_0x_prefix(i: int) -> str:
    """Serialize an integer as hex with a 0x prefix."""
    return "0x" + format(i, "x")


def base10_string_float_serializer(f: Decimal) -> str:
    """Serialize a fixed-point value as a decimal string of up to ten significant digits."""
    return _float_text(f)


def number_if_fits_or_base10_string_float_serializer(f: Decimal) -> Any:
    """Use a JSON number when the value is within the safe range, else a string."""
    d = _as_decimal(f)
    if d > _MAX_SAFE_JSON_NUMBER or d < _MIN_SAFE_JSON_NUMBER:
        return _float_text(d)
    return float(d)


def number_if_fits_or_base10_string_int_serializer(i: int) -> Any:
    """Use a JSON number when the integer is within the safe range, else a string."""
    if i > _MAX_SAFE_JSON_NUMBER or i < _MIN_SAFE_JSON_NUMBER:
        return str(i)
    return int(i)


def hex_byte_serializer(b: bytes) -> str:
    """Serialize bytes as lower-case hex without a prefix."""
    return bytes(b).hex()


def hex_byte_serializer_0x_prefix(b: bytes) -> str:
    """Serialize bytes as lower-case hex with a 0x prefix."""
    return "0x" + bytes(b).hex()


def numeric_default_name_generator(idx: int) -> str:
    """Name an unnamed tuple entry by its index."""
    return str(idx)


def _bad_component(detail: Any) -> ABIError:
    return ABIError(f"Bad ABI type component: {detail}")


@dataclass
class Serializer:
    """Options for turning a parsed ABI value tree into plain Python / JSON data."""

    formatting_mode: FormattingMode = FormattingMode.OBJECTS
    int_serializer: IntSerializer = base10_string_int_serializer
    float_serializer: FloatSerializer = base10_string_float_serializer
    byte_serializer: ByteSerializer = hex_byte_serializer
    default_name_generator: DefaultNameGenerator = numeric_default_name_generator

    def serialize(self, value: Any) -> Any:
        """Serialize a component value tree into dicts, lists and scalars."""
        return self._walk(value, "")

    def serialize_json(self, value: Any) -> str:
        """Serialize a component value tree into a JSON document."""
        return json.dumps(
            self._walk(value, ""), sort_keys=True, ensure_ascii=False, separators=(",", ":")
        )

    def _walk(self, cv: Any, breadcrumbs: str) -> Any:
        component = getattr(cv, "component", None)
        if component is None:
            raise _bad_component(cv)
        ctype = component.component_type
        if ctype is ComponentType.ELEMENTARY:
            return self._serialize_elementary(cv, breadcrumbs)
        if ctype in (ComponentType.FIXED_ARRAY, ComponentType.DYNAMIC_ARRAY):
            return [
                self._walk(child, f"{breadcrumbs}[{i}]") for i, child in enumerate(cv.children)
            ]
        if ctype is ComponentType.TUPLE:
            return self._serialize_tuple(cv, breadcrumbs)
        raise _bad_component(component)

    def _serialize_elementary(self, cv: Any, breadcrumbs: str) -> Any:
        info = cv.component.elementary_type
        name = str(info.name) if info is not None else ""
        if name in (BaseTypeName.INT.value, BaseTypeName.UINT.value):
            return self.int_serializer(cv.value)
        if name == BaseTypeName.ADDRESS.value:
            return self.byte_serializer(cv.value.to_bytes(20, "big"))
        if name == BaseTypeName.BOOL.value:
            return cv.value == 1
        if name in (BaseTypeName.FIXED.value, BaseTypeName.UFIXED.value):
            return self.float_serializer(cv.value)
        if name in (BaseTypeName.BYTES.value, BaseTypeName.FUNCTION.value):
            return self.byte_serializer(cv.value)
        if name == BaseTypeName.STRING.value:
            return cv.value
        raise ABIError(f"Unknown elementary type '{name}' at {breadcrumbs}")

    def _serialize_tuple(self, cv: Any, breadcrumbs: str) -> Any:
        mode = self.formatting_mode
        if mode is FormattingMode.OBJECTS:
            out: dict[str, Any] = {}
            for i, child in enumerate(cv.children):
                if child.component is None:
                    continue
                name = child.component.key_name or self.default_name_generator(i)
                out[name] = self._walk(child, f"{breadcrumbs}[{name}]")
            return out
        if mode is FormattingMode.FLAT_ARRAYS:
            return [
                self._walk(child, f"{breadcrumbs}[{i}]") for i, child in enumerate(cv.children)
            ]
        if mode is FormattingMode.SELF_DESCRIBING_ARRAYS:
            entries = []
            for i, child in enumerate(cv.children):
                entry: dict[str, Any] = {}
                if child.component is not None:
                    entry["name"] = child.component.key_name
                    entry["type"] = str(child.component)
                if entry.get("name") == "":
                    entry["name"] = self.default_name_generator(i)
                entry["value"] = self._walk(child, f"{breadcrumbs}[{entry.get('name')}]")
                entries.append(entry)
            return entries
        raise ABIError(f"Unknown tuple formatting mode: {mode}")