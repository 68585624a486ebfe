"""Rules for the elementary ABI types, and the registry that holds them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from ffabi.coercion import (
    ABIError,
    get_bool_as_uint,
    get_bytes,
    get_float,
    get_integer,
    get_string,
    get_uint_bytes,
)


class ComponentType(Enum):
    """Classification of a node in a parsed ABI type tree."""

    ELEMENTARY = 0
    FIXED_ARRAY = 1
    DYNAMIC_ARRAY = 2
    TUPLE = 3


class JSONEncodingType(Enum):
    """How values of an elementary type are read from and written to JSON."""

    BOOL = 0
    INTEGER = 1
    BYTES = 2
    FLOAT = 3
    STRING = 4


class BaseTypeName(str, Enum):
    """Names of the elementary types, without any suffix."""

    INT = "int"
    UINT = "uint"
    ADDRESS = "address"
    BOOL = "bool"
    FIXED = "fixed"
    UFIXED = "ufixed"
    BYTES = "bytes"
    FUNCTION = "function"
    STRING = "string"

    def __str__(self) -> str:
        return self.value


class SuffixType(Enum):
    """Whether an elementary type takes a length suffix, and of what shape."""

    NONE = 0
    M_OPTIONAL = 1
    M_REQUIRED = 2
    MXN_REQUIRED = 3


TUPLE_TYPE_STRING = "tuple"

Reader = Callable[[str, Any], Any]


def _never_dynamic(suffix: str) -> bool:
    return False


def _always_dynamic(suffix: str) -> bool:
    return True


def _dynamic_without_suffix(suffix: str) -> bool:
    return suffix == ""


@dataclass(eq=False)
class ElementaryTypeInfo:
    """Parsing rules and value reader for one elementary ABI type."""

    name: str
    suffix_type: SuffixType = SuffixType.NONE
    default_suffix: str = ""
    default_m: int = 0
    m_min: int = 0
    m_max: int = 0
    m_mod: int = 0
    n_min: int = 0
    n_max: int = 0
    fixed32: bool = False
    dynamic_rule: Callable[[str], bool] = _never_dynamic
    json_encoding_type: JSONEncodingType = JSONEncodingType.BOOL
    reader: Reader | None = None

    def is_dynamic(self, suffix: str) -> bool:
        """Return True if a value of this type with ``suffix`` has dynamic length."""
        return self.dynamic_rule(suffix)

    def read(self, desc: str, value: Any) -> Any:
        """Coerce an external value into the form this type is encoded from."""
        if self.reader is None:
            raise ABIError(f"No value reader for elementary type '{self.name}' at {desc}")
        return self.reader(desc, value)

    def __str__(self) -> str:
        name = str(self.name)
        if self.suffix_type in (SuffixType.M_OPTIONAL, SuffixType.M_REQUIRED):
            text = f"{name}<M> ({self.m_min} <= M <= {self.m_max})"
            if self.m_mod:
                text += f" (M mod {self.m_mod} == 0)"
            if self.suffix_type is SuffixType.M_OPTIONAL:
                text = f"{name} / {text}"
            if self.default_suffix:
                text += f" ({name} == {name}{self.default_suffix})"
            return text
        if self.suffix_type is SuffixType.MXN_REQUIRED:
            text = (
                f"{name}<M>x<N> ({self.m_min} <= M <= {self.m_max}) "
                f"({self.n_min} <= N <= {self.n_max})"
            )
            if self.m_mod:
                text += f" (M mod {self.m_mod} == 0)"
            if self.default_suffix:
                text += f" ({name} == {name}{self.default_suffix})"
            return text
        return name


_REGISTRY: dict[str, ElementaryTypeInfo] = {}


def register_elementary_type(info: ElementaryTypeInfo) -> ElementaryTypeInfo:
    """Add (or replace) an elementary type in the registry and return it."""
    _REGISTRY[str(info.name)] = info
    return info


def lookup_elementary_type(name: str) -> ElementaryTypeInfo | None:
    """Return the registered elementary type with this base name, or None."""
    return _REGISTRY.get(str(name))


ELEMENTARY_TYPE_INT = register_elementary_type(
    ElementaryTypeInfo(
        name=BaseTypeName.INT,
        suffix_type=SuffixType.M_REQUIRED,
        default_suffix="256",
        m_min=8,
        m_max=256,
        m_mod=8,
        fixed32=True,
        json_encoding_type=JSONEncodingType.INTEGER,
        reader=get_integer,
    )
)

ELEMENTARY_TYPE_UINT = register_elementary_type(
    ElementaryTypeInfo(
        name=BaseTypeName.UINT,
        suffix_type=SuffixType.M_REQUIRED,
        default_suffix="256",
        m_min=8,
        m_max=256,
        m_mod=8,
        fixed32=True,
        json_encoding_type=JSONEncodingType.INTEGER,
        reader=get_integer,
    )
)

ELEMENTARY_TYPE_ADDRESS = register_elementary_type(
    ElementaryTypeInfo(
        name=BaseTypeName.ADDRESS,
        default_m=160,
        fixed32=True,
        json_encoding_type=JSONEncodingType.BYTES,
        reader=get_uint_bytes,
    )
)

ELEMENTARY_TYPE_BOOL = register_elementary_type(
    ElementaryTypeInfo(
        name=BaseTypeName.BOOL,
        default_m=8,
        fixed32=True,
        json_encoding_type=JSONEncodingType.BOOL,
        reader=get_bool_as_uint,
    )
)

ELEMENTARY_TYPE_FIXED = register_elementary_type(
    ElementaryTypeInfo(
        name=BaseTypeName.FIXED,
        suffix_type=SuffixType.MXN_REQUIRED,
        default_suffix="128x18",
        m_min=8,
        m_max=256,
        m_mod=8,
        n_min=1,
        n_max=80,
        fixed32=True,
        json_encoding_type=JSONEncodingType.FLOAT,
        reader=get_float,
    )
)

ELEMENTARY_TYPE_UFIXED = register_elementary_type(
    ElementaryTypeInfo(
        name=BaseTypeName.UFIXED,
        suffix_type=SuffixType.MXN_REQUIRED,
        default_suffix="128x18",
        m_min=8,
        m_max=256,
        m_mod=8,
        n_min=1,
        n_max=80,
        fixed32=True,
        json_encoding_type=JSONEncodingType.FLOAT,
        reader=get_float,
    )
)

ELEMENTARY_TYPE_BYTES = register_elementary_type(
    ElementaryTypeInfo(
        name=BaseTypeName.BYTES,
        suffix_type=SuffixType.M_OPTIONAL,
        m_min=1,
        m_max=32,
        fixed32=False,
        dynamic_rule=_dynamic_without_suffix,
        json_encoding_type=JSONEncodingType.BYTES,
        reader=get_bytes,
    )
)

ELEMENTARY_TYPE_FUNCTION = register_elementary_type(
    ElementaryTypeInfo(
        name=BaseTypeName.FUNCTION,
        default_m=24,
        fixed32=True,
        json_encoding_type=JSONEncodingType.BYTES,
        reader=get_bytes,
    )
)

ELEMENTARY_TYPE_STRING = register_elementary_type(
    ElementaryTypeInfo(
        name=BaseTypeName.STRING,
        fixed32=False,
        dynamic_rule=_always_dynamic,
        json_encoding_type=JSONEncodingType.STRING,
        reader=get_string,
    )
)