"""EIP-712 typed structured data: type encoding and hashing (version 4)."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from Crypto.Hash import keccak

from ffabi.coercion import ABIError
from ffabi.elementary import BaseTypeName, ComponentType
from ffabi.typecomponents import Parameter, TypeComponent, parse_type_component
from ffabi.values import parse_external

EIP712_DOMAIN = "EIP712Domain"

_ARRAY_DIMENSION = re.compile(r"[+-]?[0-9]+")


@dataclass
class TypeMember:
    """One named, typed member of an EIP-712 struct type."""

    name: str
    type: str

    def encode(self) -> str:
        """Encode the member as ``type ‖ " " ‖ name``."""
        return f"{self.type} {self.name}"


TypeSet = dict[str, list[TypeMember]]


@dataclass
class TypedData:
    """The payload of an ``eth_signTypedData_v4`` request."""

    types: TypeSet = field(default_factory=dict)
    primary_type: str = ""
    domain: dict[str, Any] | None = None
    message: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TypedData:
        """Build a payload from its JSON form (``types``, ``primaryType``, ``domain``, ``message``)."""
        raw_types = data.get("types") or {}
        types = {
            type_name: [
                TypeMember(name=member.get("name", ""), type=member.get("type", ""))
                for member in (members or [])
            ]
            for type_name, members in raw_types.items()
        }
        return cls(
            types=types,
            primary_type=data.get("primaryType") or "",
            domain=data.get("domain"),
            message=data.get("message"),
        )


def keccak256(data: bytes) -> bytes:
    """Return the legacy Keccak-256 digest of ``data``."""
    return keccak.new(digest_bits=256, data=bytes(data)).digest()


def encode_type(name: str, members: list[TypeMember]) -> str:
    """Encode a type as ``name ‖ "(" ‖ member₁ ‖ "," ‖ … ‖ memberₙ ‖ ")"``."""
    return name + "(" + ",".join(member.encode() for member in members) + ")"


def encode_type_set(type_set: TypeSet, primary_type: str) -> str:
    """Encode the primary type first, then every other type sorted by name."""
    encoded = encode_type(primary_type, type_set.get(primary_type, []))
    return encoded + "".join(
        encode_type(name, type_set[name]) for name in sorted(type_set) if name != primary_type
    )


def _collect_dependencies(type_name: str, all_types: TypeSet, found: TypeSet) -> None:
    base_name = type_name.split("[", 1)[0]
    if base_name in all_types and base_name not in found:
        members = all_types[base_name]
        found[base_name] = members
        for member in members:
            _collect_dependencies(member.type, all_types, found)


def _type_encoding(type_name: str, all_types: TypeSet) -> tuple[list[TypeMember], str]:
    members = all_types.get(type_name)
    if members is None:
        raise ABIError(f"Type '{type_name}' not found in type map")
    dependencies: TypeSet = {}
    _collect_dependencies(type_name, all_types, dependencies)
    return members, encode_type_set(dependencies, type_name)


def _encode_data(
    type_name: str, value: Any, all_types: TypeSet, breadcrumbs: str
) -> bytes | None:
    members, type_encoded = _type_encoding(type_name, all_types)
    if value is None:
        # A missing struct is written as an empty bytes32 rather than hashed
        return None
    if not isinstance(value, Mapping):
        raise ABIError(f"Value for '{breadcrumbs}' is not a map: {value!r}")
    parts = [keccak256(type_encoded.encode("utf-8"))]
    for member in members:
        parts.append(
            _encode_element(
                member.type,
                value.get(member.name),
                all_types,
                _next_crumb(breadcrumbs, member.name),
            )
        )
    return b"".join(parts)


def hash_struct(type_name: str, value: Any, all_types: TypeSet, breadcrumbs: str = "") -> bytes:
    """Return ``keccak256(typeHash ‖ encodeData(value))``, or 32 zero bytes for a null value."""
    encoded = _encode_data(type_name, value, all_types, breadcrumbs)
    if encoded is None:
        return bytes(32)
    return keccak256(encoded)


def _next_crumb(breadcrumbs: str, name: str) -> str:
    return f"{breadcrumbs}.{name}" if breadcrumbs else name


def _elementary_component(type_name: str) -> TypeComponent:
    component = parse_type_component(Parameter(type=type_name))
    if component.component_type is not ComponentType.ELEMENTARY:
        raise ABIError(f"Type '{component}' is not an elementary type")
    return component


def _abi_encode(component: TypeComponent, value: Any, breadcrumbs: str) -> bytes:
    return parse_external(component, value, breadcrumbs).encode_abi_data()


def _encode_element(type_name: str, value: Any, all_types: TypeSet, breadcrumbs: str) -> bytes:
    if type_name.endswith("]"):
        return _hash_array(type_name, all_types, value, breadcrumbs)
    if type_name in all_types:
        return hash_struct(type_name, value, all_types, breadcrumbs)

    component = _elementary_component(type_name)
    info = component.elementary_type
    base = str(info.name)
    if base in (
        BaseTypeName.ADDRESS.value,
        BaseTypeName.BOOL.value,
        BaseTypeName.INT.value,
        BaseTypeName.UINT.value,
    ):
        return _abi_encode(component, value, breadcrumbs)
    if base == BaseTypeName.BYTES.value:
        if component.is_elementary_fixed():
            return _abi_encode(component, value, breadcrumbs)
        return keccak256(info.read(breadcrumbs, value))
    if base == BaseTypeName.STRING.value:
        return keccak256(info.read(breadcrumbs, value).encode("utf-8"))
    raise ABIError(f"EIP-712 does not support ABI type '{component}'")


def _hash_array(type_name: str, all_types: TypeSet, value: Any, breadcrumbs: str) -> bytes:
    open_pos = type_name.rfind("[")
    if open_pos <= 0 or not type_name.endswith("]"):
        raise ABIError(f"Invalid array suffix in type '{type_name}'")
    dimension = type_name[open_pos + 1 : -1]
    element_type = type_name[:open_pos]

    if not isinstance(value, (list, tuple)):
        raise ABIError(f"Value for array type '{type_name}' is not an array: {value!r}")
    if dimension:
        if not _ARRAY_DIMENSION.fullmatch(dimension):
            raise ABIError(f"Invalid array suffix in type '{type_name}'")
        expected = int(dimension)
        if len(value) != expected:
            raise ABIError(
                f"Array type '{type_name}' requires {expected} entries, received {len(value)}"
            )
    encoded = b"".join(
        _encode_element(element_type, item, all_types, f"{breadcrumbs}[{i}]")
        for i, item in enumerate(value)
    )
    return keccak256(encoded)


def encode_typed_data_v4(payload: TypedData) -> bytes:
    """Return the 32 byte EIP-712 (v4) signing hash of a typed data payload."""
    types: TypeSet = dict(payload.types or {})
    types.setdefault(EIP712_DOMAIN, [])
    domain = payload.domain if payload.domain is not None else {}
    if not payload.primary_type:
        raise ABIError("Primary type must be specified for EIP-712 typed data")

    encoded = b"\x19\x01" + hash_struct(EIP712_DOMAIN, domain, types, "domain")
    if payload.primary_type != EIP712_DOMAIN:
        encoded += hash_struct(payload.primary_type, payload.message, types, "")
    return keccak256(encoded)