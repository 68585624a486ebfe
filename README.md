# ffabi

A pure-Python library for working with Ethereum ABI types and values:

- parse ABI type strings (`uint256[8][]`, `fixed128x18`, `bytes`, nested
  tuples) into a tree of type components;
- coerce loosely typed input (JSON numbers, decimal or `0x` hex strings,
  bytes, booleans) into values matching that tree;
- ABI-encode those values, with the head/tail layout for dynamic types;
- serialize parsed values back into JSON-friendly structures in several layouts;
- compute EIP-712 (`eth_signTypedData_v4`) hashes, and derive EIP-712 type
  sets from ABI tuples that carry Solidity `internalType` names.

Keccak-256 hashing is provided by `pycryptodome`.

## Installation

```
pip install ffabi
```

## Parsing types

```python
from ffabi.typecomponents import Parameter, parse_type_component

tc = parse_type_component(Parameter(name="amounts", type="uint[]"))
print(tc)                    # uint256[]
print(tc.component_type)     # ComponentType.DYNAMIC_ARRAY
```

`Parameter` has `name`, `type`, `internal_type`, `indexed` and `components`
(for tuples). `parse_type_component` returns a `TypeComponent` whose
`str()` is the canonical type signature, with aliases expanded (`uint` becomes
`uint256`, `fixed` becomes `fixed128x18`). Invalid suffixes, unknown types and
malformed array dimensions raise `ffabi.coercion.ABIError`, a subclass of
`ValueError`.

The rules for each elementary type live in `ffabi.elementary` as
`ElementaryTypeInfo` objects (`ELEMENTARY_TYPE_INT`, `ELEMENTARY_TYPE_BYTES`
and so on); `lookup_elementary_type(name)` fetches one and
`register_elementary_type(info)` adds or replaces one.

## Reading and encoding values

```python
from ffabi.values import parse_external

value = parse_external(tc, ["0x123", 456], "")
print(value.encode_abi_data().hex())
```

Input is coerced as follows:

- integers: Python numbers, or strings with a base chosen by prefix (`0x`,
  `0o`, `0b`, a leading `0` for octal, otherwise decimal);
- `fixed`/`ufixed`: numbers or numeric strings, held as `decimal.Decimal`;
- `bool`: `True`/`False`, or a string compared case-insensitively with `"true"`;
- `bytes<M>`, `bytes`, `function`: bytes, or hex strings with or without `0x`;
- `address`: as bytes, held as an unsigned integer;
- `string`: strings, or bytes decoded as UTF-8.

Tuples accept either a list (positional) or a mapping keyed by member name.
Errors carry a breadcrumb path to the offending input.
`ComponentValue.elementary_abi_data()` encodes a single elementary value and
reports whether its encoding is dynamic.

## Serializing values

```python
from ffabi.serializer import (
    FormattingMode,
    Serializer,
    hex_byte_serializer_0x_prefix,
    hex_int_serializer_0x_prefix,
)

serializer = Serializer(
    formatting_mode=FormattingMode.FLAT_ARRAYS,
    int_serializer=hex_int_serializer_0x_prefix,
    byte_serializer=hex_byte_serializer_0x_prefix,
)
print(serializer.serialize_json(value))
```

`Serializer.serialize` returns plain dicts, lists and scalars;
`serialize_json` returns a JSON string. Formatting modes are `OBJECTS`
(the default, keyed by member name), `FLAT_ARRAYS` and
`SELF_DESCRIBING_ARRAYS` (entries of `name`, `type` and `value`). Unnamed
tuple members are named by `default_name_generator`, by default their index.
Other serializers provided: `base10_string_int_serializer`,
`number_if_fits_or_base10_string_int_serializer`,
`base10_string_float_serializer`,
`number_if_fits_or_base10_string_float_serializer`, `hex_byte_serializer`.
`ComponentValue.json()` uses the defaults.

## EIP-712

```python
from ffabi.eip712.typed_data import TypedData, encode_typed_data_v4

payload = TypedData.from_dict({
    "types": {
        "Person": [{"name": "name", "type": "string"},
                   {"name": "wallet", "type": "address"}],
    },
    "primaryType": "Person",
    "message": {"name": "Alice",
                "wallet": "0x0000000000000000000000000000000000000001"},
})
digest = encode_typed_data_v4(payload)
print("0x" + digest.hex())
```

An empty `EIP712Domain` type is added when missing; a `null` struct value is
encoded as 32 zero bytes. `keccak256`, `hash_struct`, `encode_type` and
`encode_type_set` are also available from `ffabi.eip712.typed_data`.

To derive the types from an ABI tuple:

```python
from ffabi.eip712.abi_to_typed_data import abi_to_typed_data_v4
from ffabi.typecomponents import Parameter, parse_type_component

person = Parameter(
    type="tuple",
    internal_type="struct Example.Person",
    components=[Parameter(name="name", type="string"),
                Parameter(name="wallet", type="address")],
)
primary_type, type_set = abi_to_typed_data_v4(parse_type_component(person))
```

Only `address`, `bool`, `string`, `int<M>`, `uint<M>`, `bytes` and
`bytes<M>` map to EIP-712 types; `fixed`/`ufixed` and `function` raise
`ABIError`.

## What this package does not do

- It does not decode ABI-encoded data back into values.
- It has no model of whole ABI documents (functions, events, errors), so it
  does not compute function selectors, event signatures or call data.
- It does not hold keys or produce signatures; EIP-712 support stops at the
  hash to be signed.

## Running the tests

```
pip install -e ".[test]"
pytest
```