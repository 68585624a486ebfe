import base64
import json

import pytest

from ffabi.coercion import ABIError
from ffabi.elementary import ComponentType, ElementaryTypeInfo
from ffabi.serializer import (
    FormattingMode,
    Serializer,
    base10_string_float_serializer,
    hex_byte_serializer,
    hex_byte_serializer_0x_prefix,
    hex_int_serializer_0x_prefix,
    number_if_fits_or_base10_string_float_serializer,
    number_if_fits_or_base10_string_int_serializer,
    numeric_default_name_generator,
)
from ffabi.typecomponents import Parameter, TypeComponent, parse_type_component
from ffabi.values import ComponentValue, parse_external


def _inputs(*params):
    return parse_type_component(Parameter(type="tuple", components=list(params)))


def _sample1():
    return _inputs(
        Parameter(
            name="a",
            type="tuple",
            components=[
                Parameter(name="b", type="uint256"),
                Parameter(name="c", type="string[2]"),
                Parameter(name="d", type="bytes"),
            ],
        )
    )


def _sample2():
    types = {
        "a": "uint8",
        "b": "int8",
        "c": "address",
        "d": "bool",
        "e": "fixed",
        "f": "ufixed",
        "g": "bytes10",
        "h": "bytes",
        "i": "function",
        "j": "string",
    }
    return _inputs(*(Parameter(name=k, type=t) for k, t in types.items()))


def test_json_serialization_formats_tuple():
    v = parse_external(
        _sample1(),
        json.loads('{"a": {"b": 12345, "c": ["abc", "def"], "d": "0xfeedbeef"}}'),
    )

    assert json.loads(v.json()) == {"a": {"b": "12345", "c": ["abc", "def"], "d": "feedbeef"}}

    j2 = Serializer(
        formatting_mode=FormattingMode.FLAT_ARRAYS,
        int_serializer=hex_int_serializer_0x_prefix,
        byte_serializer=hex_byte_serializer_0x_prefix,
    ).serialize_json(v)
    assert json.loads(j2) == [["0x3039", ["abc", "def"], "0xfeedbeef"]]

    j3 = Serializer(
        formatting_mode=FormattingMode.SELF_DESCRIBING_ARRAYS,
        int_serializer=lambda i: "0o" + format(i, "o"),
        byte_serializer=lambda b: base64.b64encode(b).decode(),
    ).serialize_json(v)
    assert json.loads(j3) == [
        {
            "name": "a",
            "type": "(uint256,string[2],bytes)",
            "value": [
                {"name": "b", "type": "uint256", "value": "0o30071"},
                {"name": "c", "type": "string[2]", "value": ["abc", "def"]},
                {"name": "d", "type": "bytes", "value": "/u2+7w=="},
            ],
        }
    ]


def test_json_serialization_for_types():
    v = parse_external(
        _sample2(),
        json.loads(
            """{
                "a": 128,
                "b": -128,
                "c": "0xABCA79A8Ac11452F263A9861624c498220980Ca7",
                "d": true,
                "e": -1.28,
                "f": 1.28,
                "g": "0x09080706050403020100",
                "h": "0x",
                "i": "9c7e63a423cf0e0163fbab351d3833b4ba6f05faf7a6d199",
                "j": "Bob"
            }"""
        ),
    )
    assert json.loads(v.json()) == {
        "a": "128",
        "b": "-128",
        "c": "abca79a8ac11452f263a9861624c498220980ca7",
        "d": True,
        "e": "-1.28",
        "f": "1.28",
        "g": "09080706050403020100",
        "h": "",
        "i": "9c7e63a423cf0e0163fbab351d3833b4ba6f05faf7a6d199",
        "j": "Bob",
    }
    assert Serializer().serialize(v)["a"] == "128"


def test_number_if_possible_serialization():
    inputs = _inputs(
        Parameter(name="a", type="uint"),
        Parameter(name="b", type="int"),
        Parameter(name="c", type="ufixed"),
        Parameter(name="d", type="fixed"),
    )
    s = Serializer(
        float_serializer=number_if_fits_or_base10_string_float_serializer,
        int_serializer=number_if_fits_or_base10_string_int_serializer,
    )

    v = parse_external(
        inputs,
        {"a": 9007199254740991, "b": -9007199254740991, "c": 9007199254740991, "d": -9007199254740991},
    )
    assert json.loads(s.serialize_json(v)) == {
        "a": 9007199254740991,
        "b": -9007199254740991,
        "c": 9007199254740991,
        "d": -9007199254740991,
    }

    v = parse_external(
        inputs,
        {"a": 9007199254740992, "b": -9007199254740992, "c": 9007199254740992, "d": -9007199254740992},
    )
    assert json.loads(s.serialize_json(v)) == {
        "a": "9007199254740992",
        "b": "-9007199254740992",
        "c": "9.007199255e+15",
        "d": "-9.007199255e+15",
    }


def test_serialize_json_bad_component():
    with pytest.raises(ABIError, match="Bad ABI type component"):
        Serializer().serialize_json(ComponentValue())

    with pytest.raises(ABIError, match="Bad ABI type component"):
        Serializer().serialize_json(ComponentValue(component=TypeComponent(component_type=None)))

    with pytest.raises(ABIError, match="Unknown elementary type"):
        Serializer().serialize(ComponentValue(component=TypeComponent()))

    with pytest.raises(ABIError, match="Bad ABI type component"):
        Serializer().serialize_json(
            ComponentValue(
                component=TypeComponent(component_type=ComponentType.DYNAMIC_ARRAY),
                children=[ComponentValue()],
            )
        )

    bad_tuple = ComponentValue(
        component=TypeComponent(component_type=ComponentType.TUPLE),
        children=[
            ComponentValue(
                component=TypeComponent(key_name="a", elementary_type=ElementaryTypeInfo(name=""))
            )
        ],
    )
    with pytest.raises(ABIError, match="Unknown elementary type"):
        Serializer().serialize_json(bad_tuple)
    with pytest.raises(ABIError, match="Unknown elementary type"):
        Serializer(formatting_mode=FormattingMode.FLAT_ARRAYS).serialize_json(bad_tuple)
    with pytest.raises(ABIError, match="Unknown elementary type"):
        Serializer(formatting_mode=FormattingMode.SELF_DESCRIBING_ARRAYS).serialize_json(bad_tuple)
    with pytest.raises(ABIError, match="Unknown tuple formatting mode"):
        Serializer(formatting_mode=999).serialize_json(bad_tuple)


def test_json_serialization_formats_anonymous_tuple():
    inputs = _inputs(Parameter(type="address"), Parameter(type="uint"))
    v = parse_external(inputs, ["0x6c26465984ac94713E83300d1F002296772eBB64", 1])

    assert json.loads(v.json()) == {
        "0": "6c26465984ac94713e83300d1f002296772ebb64",
        "1": "1",
    }

    j2 = Serializer(formatting_mode=FormattingMode.FLAT_ARRAYS).serialize_json(v)
    assert json.loads(j2) == ["6c26465984ac94713e83300d1f002296772ebb64", "1"]

    def names(idx):
        return "input" + (str(idx) if idx > 0 else "")

    j3 = Serializer(
        formatting_mode=FormattingMode.SELF_DESCRIBING_ARRAYS,
        default_name_generator=names,
    ).serialize_json(v)
    assert json.loads(j3) == [
        {"name": "input", "type": "address", "value": "6c26465984ac94713e83300d1f002296772ebb64"},
        {"name": "input1", "type": "uint256", "value": "1"},
    ]


def test_simple_serializer_functions():
    assert hex_int_serializer_0x_prefix(12345) == "0x3039"
    assert hex_byte_serializer(b"\xfe\xed") == "feed"
    assert hex_byte_serializer_0x_prefix(b"\xfe\xed") == "0xfeed"
    assert numeric_default_name_generator(7) == "7"
    assert number_if_fits_or_base10_string_int_serializer(-9007199254740992) == "-9007199254740992"
    assert number_if_fits_or_base10_string_int_serializer(42) == 42


def test_base10_float_serializer_formats():
    from decimal import Decimal

    assert base10_string_float_serializer(Decimal("-1.2345")) == "-1.2345"
    assert base10_string_float_serializer(Decimal("12345")) == "12345"
    assert base10_string_float_serializer(Decimal("0")) == "0"
    assert base10_string_float_serializer(Decimal("0.00001")) == "1e-05"