"""Conversion of ABI tuple definitions into EIP-712 type sets."""

from __future__ import annotations

import re

from ffabi.coercion import ABIError
from ffabi.eip712.typed_data import TypeMember, TypeSet
from ffabi.elementary import BaseTypeName, ComponentType
from ffabi.typecomponents import Parameter, TypeComponent

_INTERNAL_TYPE_STRUCT = re.compile(r"^struct (.*\.)?([^.\[\]]+)(\[[0-9]*\])*$")

_UNCHANGED_BASE_TYPES = (
    BaseTypeName.ADDRESS.value,
    BaseTypeName.BOOL.value,
    BaseTypeName.STRING.value,
    BaseTypeName.INT.value,
    BaseTypeName.UINT.value,
)


def _extract_solidity_type_name(parameter: Parameter | None) -> str:
    """Read the struct name from the Solidity ``internalType`` of a parameter."""
    internal_type = parameter.internal_type if parameter is not None else ""
    match = _INTERNAL_TYPE_STRUCT.match(internal_type or "")
    if match is None:
        raise ABIError(
            f"Unable to extract struct name from internalType '{internal_type}' for EIP-712"
        )
    return match.group(2)


def _map_elementary_abi_type(component: TypeComponent) -> str:
    """Map an elementary ABI component to its EIP-712 type name."""
    if component.component_type is not ComponentType.ELEMENTARY or component.elementary_type is None:
        raise ABIError(f"Type '{component}' is not an elementary type")
    base = str(component.elementary_type.name)
    if base in _UNCHANGED_BASE_TYPES:
        return base + component.elementary_suffix
    if base == BaseTypeName.BYTES.value:
        if component.is_elementary_fixed():
            return base + component.elementary_suffix
        return base
    raise ABIError(f"EIP-712 does not support ABI type '{component}'")


def _map_abi_type(component: TypeComponent) -> str:
    """Map a parsed ABI component (struct, array or elementary) to an EIP-712 type string."""
    ctype = component.component_type
    if ctype is ComponentType.TUPLE:
        return _extract_solidity_type_name(component.parameter)
    if ctype in (ComponentType.DYNAMIC_ARRAY, ComponentType.FIXED_ARRAY):
        child = _map_abi_type(component.array_child)
        if ctype is ComponentType.FIXED_ARRAY:
            return f"{child}[{component.array_length}]"
        return child + "[]"
    return _map_elementary_abi_type(component)


def _add_abi_types(component: TypeComponent, type_set: TypeSet) -> None:
    """Recursively add every struct type reachable from ``component`` to ``type_set``."""
    ctype = component.component_type
    if ctype is ComponentType.TUPLE:
        type_name = _extract_solidity_type_name(component.parameter)
        if type_name in type_set:
            return
        type_set[type_name] = [
            TypeMember(name=child.key_name, type=_map_abi_type(child))
            for child in component.tuple_children
        ]
        for child in component.tuple_children:
            _add_abi_types(child, type_set)
    elif ctype in (ComponentType.DYNAMIC_ARRAY, ComponentType.FIXED_ARRAY):
        _add_abi_types(component.array_child, type_set)


def abi_to_typed_data_v4(component: TypeComponent) -> tuple[str, TypeSet]:
    """Convert an ABI tuple into its EIP-712 primary type name and type set."""
    if component.component_type is not ComponentType.TUPLE:
        raise ABIError(f"EIP-712 primary type must be a tuple, received '{component}'")
    primary_type = _extract_solidity_type_name(component.parameter)
    type_set: TypeSet = {}
    _add_abi_types(component, type_set)
    return primary_type, type_set