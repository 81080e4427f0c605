from __future__ import annotations

import pytest

from rpc_contract.abi_types import Kind, parse_type, parse_types
from rpc_contract.errors import UnsupportedType


class TestParseType:
    """Type strings parsed into AbiType."""

    def test_elementary_types(self):
        assert parse_type("address").kind is Kind.ADDRESS
        assert parse_type("bool").kind is Kind.BOOL
        assert parse_type("string").kind is Kind.STRING
        assert parse_type("bytes").kind is Kind.BYTES

    def test_integer_widths(self):
        assert parse_type("uint8").bits == 8
        assert parse_type("int128").kind is Kind.INT
        assert parse_type("int128").bits == 128

    def test_bare_int_aliases_256_bits(self):
        assert str(parse_type("uint")) == "uint256"
        assert str(parse_type("int")) == "int256"

    def test_fixed_bytes(self):
        t = parse_type("bytes32")
        assert t.kind is Kind.FIXED_BYTES
        assert t.size == 32
        assert not t.is_dynamic

    def test_dynamic_array(self):
        t = parse_type("address[]")
        assert t.kind is Kind.ARRAY
        assert t.length is None
        assert t.item == parse_type("address")
        assert t.is_dynamic

    def test_nested_array_outer_dimension_is_last(self):
        t = parse_type("uint256[][2]")
        assert t.length == 2
        assert t.item is not None and t.item.length is None
        assert t.is_dynamic
        assert str(t) == "uint256[][2]"

    def test_static_fixed_array_is_inline(self):
        t = parse_type("uint256[3]")
        assert not t.is_dynamic
        assert t.head_words == 3
        assert parse_type("uint256[2][3]").head_words == 6

    def test_fixed_array_of_dynamic_items_is_dynamic(self):
        t = parse_type("string[2]")
        assert t.is_dynamic
        assert t.head_words == 1

    def test_parse_types_keeps_order(self):
        kinds = [t.kind for t in parse_types(["bool", "string", "uint16"])]
        assert kinds == [Kind.BOOL, Kind.STRING, Kind.UINT]

    @pytest.mark.parametrize(
        "raw",
        ["", "tuple", "(uint256,address)", "uint7", "uint264", "int0", "bytes0", "bytes33", "fixed128x18", "uint256[0]", "foo"],
    )
    def test_unsupported(self, raw):
        with pytest.raises(UnsupportedType):
            parse_type(raw)
