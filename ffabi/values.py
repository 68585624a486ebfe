"""Values matched against a parsed ABI type tree, read from loosely typed input."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ffabi.coercion import ABIError, get_string
from ffabi.elementary import ComponentType
from ffabi.encoding import encode_component_value, encode_elementary
from ffabi.serializer import Serializer
from ffabi.typecomponents import TypeComponent


@dataclass(eq=False)
class ComponentValue:
    """A value, or tree of values, matching a :class:`TypeComponent` tree."""

    component: TypeComponent | None = None
    children: list[ComponentValue] = field(default_factory=list)
    value: Any = None

    def encode_abi_data(self) -> bytes:
        """Return the ABI encoding of this value tree."""
        data, _ = encode_component_value(self, "")
        return data

    def elementary_abi_data(self) -> tuple[bytes, bool]:
        """Encode this elementary value, returning the data and whether it is dynamic."""
        component = self.component
        if component is None or component.elementary_type is None:
            raise ABIError(f"Component '{component}' is not an elementary type")
        return encode_elementary(str(component), component, self.value)

    def json(self) -> str:
        """Serialize with the default :class:`Serializer` options."""
        return Serializer().serialize_json(self)


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _walk_array(breadcrumbs: str, value: Any, component: TypeComponent) -> ComponentValue:
    if not _is_array(value):
        raise ABIError(f"Expected an array at {breadcrumbs}, received {value!r}")
    items = list(value)
    if (
        component.component_type is ComponentType.FIXED_ARRAY
        and len(items) != component.array_length
    ):
        raise ABIError(
            f"Fixed length array at {breadcrumbs} requires {component.array_length} "
            f"entries, received {len(items)}"
        )
    return ComponentValue(
        component=component,
        children=[
            walk_input(f"{breadcrumbs}[{i}]", item, component.array_child)
            for i, item in enumerate(items)
        ],
    )


def _walk_tuple_array(breadcrumbs: str, items: list, component: TypeComponent) -> ComponentValue:
    expected = len(component.tuple_children)
    if len(items) != expected:
        raise ABIError(
            f"Tuple at {breadcrumbs} requires {expected} entries, received {len(items)}"
        )
    return ComponentValue(
        component=component,
        children=[
            walk_input(f"{breadcrumbs}.{i}", item, child)
            for i, (item, child) in enumerate(zip(items, component.tuple_children))
        ],
    )


def _walk_tuple(breadcrumbs: str, value: Any, component: TypeComponent) -> ComponentValue:
    if _is_array(value):
        return _walk_tuple_array(breadcrumbs, list(value), component)
    if not isinstance(value, Mapping):
        raise ABIError(
            f"Tuple at {breadcrumbs} requires an array or an object, received {value!r}"
        )
    entries = {get_string(breadcrumbs, key): item for key, item in value.items()}
    children = []
    for i, child in enumerate(component.tuple_children):
        if child.key_name == "":
            raise ABIError(
                f"Tuple entry {i} at {breadcrumbs} has no name, so must be supplied as an array"
            )
        child_breadcrumbs = f"{breadcrumbs}.{child.key_name}"
        if child.key_name not in entries:
            raise ABIError(f"Missing input value for '{child.key_name}' at {child_breadcrumbs}")
        children.append(walk_input(child_breadcrumbs, entries[child.key_name], child))
    return ComponentValue(component=component, children=children)


def walk_input(breadcrumbs: str, value: Any, component: TypeComponent) -> ComponentValue:
    """Match an input value against ``component``, coercing elementary values."""
    ctype = component.component_type
    if ctype is ComponentType.ELEMENTARY:
        if component.elementary_type is None:
            raise ABIError(f"Bad ABI type component: {component}")
        return ComponentValue(
            component=component, value=component.elementary_type.read(breadcrumbs, value)
        )
    if ctype in (ComponentType.FIXED_ARRAY, ComponentType.DYNAMIC_ARRAY):
        return _walk_array(breadcrumbs, value, component)
    if ctype is ComponentType.TUPLE:
        return _walk_tuple(breadcrumbs, value, component)
    raise ABIError(f"Bad ABI type component: {ctype}")


def parse_external(component: TypeComponent, value: Any, desc: str = "") -> ComponentValue:
    """Parse external data (such as decoded JSON) against a type component tree."""
    return walk_input(desc, value, component)