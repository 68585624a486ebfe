"""Parsing of ABI parameter type strings into trees of type components.

A type such as ``((uint256,string[2],string[])[][3][],string)`` is broken
down through tuples and every array dimension, down to the elementary
types, which mirrors the shape of the values supplied for it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ffabi.coercion import ABIError
from ffabi.elementary import (
    TUPLE_TYPE_STRING,
    ComponentType,
    ElementaryTypeInfo,
    SuffixType,
    lookup_elementary_type,
)

_DIGITS = re.compile(r"[0-9]+")
_MAX_UINT16 = (1 << 16) - 1
_MAX_UINT64 = (1 << 64) - 1


@dataclass
class Parameter:
    """One ABI parameter: a function/event input or output, or a tuple member."""

    name: str = ""
    type: str = ""
    internal_type: str = ""
    indexed: bool = False
    components: list[Parameter] = field(default_factory=list)


@dataclass(eq=False)
class TypeComponent:
    """A node in the parsed type tree of an ABI parameter."""

    component_type: ComponentType | None = ComponentType.ELEMENTARY
    elementary_type: ElementaryTypeInfo | None = None
    elementary_suffix: str = ""
    m: int = 0
    n: int = 0
    array_length: int = 0
    array_child: TypeComponent | None = None
    key_name: str = ""
    tuple_children: list[TypeComponent] = field(default_factory=list)
    parameter: Parameter | None = field(default=None, repr=False)

    def is_elementary_fixed(self) -> bool:
        """Return True for elementary types whose encoding has a fixed length."""
        if self.elementary_type is None:
            return False
        return not self.elementary_type.is_dynamic(self.elementary_suffix)

    def __str__(self) -> str:
        ctype = self.component_type
        if ctype is ComponentType.ELEMENTARY and self.elementary_type is not None:
            return f"{self.elementary_type.name}{self.elementary_suffix}"
        if ctype is ComponentType.FIXED_ARRAY and self.array_child is not None:
            return f"{self.array_child}[{self.array_length}]"
        if ctype is ComponentType.DYNAMIC_ARRAY and self.array_child is not None:
            return f"{self.array_child}[]"
        if ctype is ComponentType.TUPLE:
            return "(" + ",".join(str(child) for child in self.tuple_children) + ")"
        return ""


def _invalid_suffix(abi_type: str, info: ElementaryTypeInfo) -> ABIError:
    return ABIError(f"Invalid suffix in ABI type '{abi_type}' - rules: {info}")


def _parse_uint(text: str, limit: int) -> int | None:
    if not _DIGITS.fullmatch(text):
        return None
    value = int(text)
    return value if value <= limit else None


def _parse_m_suffix(abi_type: str, tc: TypeComponent, suffix: str) -> None:
    info = tc.elementary_type
    value = _parse_uint(suffix, _MAX_UINT16)
    if value is None:
        raise _invalid_suffix(abi_type, info)
    tc.m = value
    if value < info.m_min or value > info.m_max:
        raise _invalid_suffix(abi_type, info)
    if info.m_mod and value % info.m_mod:
        raise _invalid_suffix(abi_type, info)


def _parse_n_suffix(abi_type: str, tc: TypeComponent, suffix: str) -> None:
    info = tc.elementary_type
    value = _parse_uint(suffix, _MAX_UINT16)
    if value is None:
        raise _invalid_suffix(abi_type, info)
    tc.n = value
    if value < info.n_min or value > info.n_max:
        raise _invalid_suffix(abi_type, info)


def _parse_mxn_suffix(abi_type: str, tc: TypeComponent, suffix: str) -> None:
    pos = suffix.find("x")
    if pos < 0 or pos >= len(suffix) - 1:
        raise _invalid_suffix(abi_type, tc.elementary_type)
    _parse_m_suffix(abi_type, tc, suffix[:pos])
    _parse_n_suffix(abi_type, tc, suffix[pos + 1 :])


def _parse_arrays(
    parameter: Parameter, abi_type: str, child: TypeComponent, arrays: str
) -> TypeComponent:
    current = child
    rest = arrays
    while rest:
        if not rest.startswith("["):
            raise ABIError(f"Invalid array specification in ABI type '{abi_type}'")
        close = rest.find("]")
        if close < 0:
            raise ABIError(f"Invalid array specification in ABI type '{abi_type}'")
        dimension = rest[1:close]
        rest = rest[close + 1 :]
        if dimension == "":
            current = TypeComponent(
                component_type=ComponentType.DYNAMIC_ARRAY,
                array_child=current,
                key_name=parameter.name,
                parameter=parameter,
            )
        else:
            length = _parse_uint(dimension, _MAX_UINT64)
            if length is None:
                raise ABIError(f"Invalid array specification in ABI type '{abi_type}'")
            current = TypeComponent(
                component_type=ComponentType.FIXED_ARRAY,
                array_child=current,
                array_length=length,
                key_name=parameter.name,
                parameter=parameter,
            )
    return current


def _split_type(abi_type: str) -> tuple[str, str, str]:
    """Split ``uint256[8][]`` into ``uint``, ``256`` and ``[8][]``."""
    end = 0
    while end < len(abi_type) and "a" <= abi_type[end] <= "z":
        end += 1
    base = abi_type[:end]
    bracket = abi_type.find("[", end)
    if bracket < 0:
        return base, abi_type[end:], ""
    return base, abi_type[end:bracket], abi_type[bracket:]


def _parse_elementary(parameter: Parameter, abi_type: str, base: str, suffix: str) -> TypeComponent:
    info = lookup_elementary_type(base)
    if info is None:
        raise ABIError(f"Unsupported ABI type '{base}' in '{abi_type}'")
    if suffix == "":
        suffix = info.default_suffix
    tc = TypeComponent(
        component_type=ComponentType.ELEMENTARY,
        elementary_type=info,
        elementary_suffix=suffix,
        key_name=parameter.name,
        m=info.default_m,
        parameter=parameter,
    )
    if info.suffix_type is SuffixType.NONE:
        if suffix:
            raise ABIError(
                f"Unsupported suffix '{suffix}' in ABI type '{abi_type}' - rules: {info}"
            )
    elif info.suffix_type is SuffixType.M_REQUIRED:
        if not suffix:
            raise ABIError(f"Missing suffix for ABI type '{abi_type}' - rules: {info}")
        _parse_m_suffix(abi_type, tc, suffix)
    elif info.suffix_type is SuffixType.M_OPTIONAL:
        if suffix:
            _parse_m_suffix(abi_type, tc, suffix)
    elif info.suffix_type is SuffixType.MXN_REQUIRED:
        if not suffix:
            raise ABIError(f"Missing suffix for ABI type '{abi_type}' - rules: {info}")
        _parse_mxn_suffix(abi_type, tc, suffix)
    return tc


def parse_type_component(parameter: Parameter) -> TypeComponent:
    """Parse the type of ``parameter`` (and its components) into a type tree."""
    abi_type = parameter.type
    base, suffix, arrays = _split_type(abi_type)
    if base == TUPLE_TYPE_STRING:
        tc = TypeComponent(
            component_type=ComponentType.TUPLE,
            tuple_children=[parse_type_component(c) for c in parameter.components],
            key_name=parameter.name,
            parameter=parameter,
        )
    else:
        tc = _parse_elementary(parameter, abi_type, base, suffix)
    if arrays:
        return _parse_arrays(parameter, abi_type, tc, arrays)
    return tc