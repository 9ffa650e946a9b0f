"""
Tests for the Solidity type-string grammar.
"""

import pytest

from abi_schema.engine.solidity_types import (
    InvalidTypeString,
    SolidityType,
    TypeNestingTooDeep,
    is_solidity_type,
    is_tuple_form,
    parse_type,
    validate_parameter_type,
)

VALID_FLAT_TYPES = [
    "address",
    "bool",
    "string",
    "bytes",
    "function",
    "int",
    "uint",
    "int8",
    "uint256",
    "int136",
    "bytes1",
    "bytes32",
    "fixed",
    "ufixed",
    "fixed128x18",
    "ufixed8x0",
    "fixed256x80",
    "uint8[2]",
    "address[][]",
    "string[0]",
    "bytes32[3][]",
    "int256[10]",
]

INVALID_FLAT_TYPES = [
    "notAValidType",
    "",
    "uint7",
    "uint264",
    "int0",
    "bytes0",
    "bytes33",
    "uint8[01]",
    "uint8[-1]",
    "uint8[",
    "uint8]",
    "Uint256",
    "uint256 ",
    "fixed7x1",
    "fixed8x81",
    "fixed128",
    "address payable",
    "tuple",
    "uint256[2]x",
]


# ─────────────────────────────────────────────────────────────────────
# Recognisers
# ─────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("type_str", VALID_FLAT_TYPES)
def test_valid_flat_types(type_str):
    assert is_solidity_type(type_str)


@pytest.mark.parametrize("type_str", INVALID_FLAT_TYPES)
def test_invalid_flat_types(type_str):
    assert not is_solidity_type(type_str)


def test_non_strings_are_not_types():
    assert not is_solidity_type(None)
    assert not is_solidity_type(256)
    assert not is_tuple_form(["tuple"])


def test_tuple_form_is_a_prefix_test():
    assert is_tuple_form("tuple")
    assert is_tuple_form("tuple[2][]")
    assert is_tuple_form("tuple[x]")
    assert not is_tuple_form("tuples")
    assert not is_tuple_form("(uint256)")


def test_validate_parameter_type():
    assert validate_parameter_type("tuple") is True
    assert validate_parameter_type("tuple[2][]") is True
    assert validate_parameter_type("uint256[]") is False

    with pytest.raises(InvalidTypeString) as exc_info:
        validate_parameter_type("notAValidType")
    assert exc_info.value.type_str == "notAValidType"

    with pytest.raises(InvalidTypeString):
        validate_parameter_type("tuple[x]")
    with pytest.raises(InvalidTypeString):
        validate_parameter_type("(uint256,bool)")


# ─────────────────────────────────────────────────────────────────────
# Parser
# ─────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "type_str",
    VALID_FLAT_TYPES + ["tuple", "tuple[2][]", "(uint256,(bool,address)[])[3]", "()", "(int,fixed)[][4]"],
)
def test_parse_then_format_round_trips(type_str):
    assert str(parse_type(type_str)) == type_str


def test_decomposition():
    parsed = parse_type("bytes32[3][]")
    assert parsed == SolidityType("bytes", "32", (3, None))
    assert parsed.is_array
    assert not parsed.is_tuple
    assert str(parsed.element_type()) == "bytes32[3]"
    assert str(parsed.element_type().element_type()) == "bytes32"

    with pytest.raises(ValueError):
        parse_type("bool").element_type()


def test_bare_aliases():
    assert parse_type("uint").bits == 256
    assert parse_type("int").bits == 256
    assert parse_type("uint").canonical() == "uint256"
    assert parse_type("int[]").canonical() == "int256[]"
    assert parse_type("fixed").canonical() == "fixed128x18"
    assert parse_type("ufixed[2]").canonical() == "ufixed128x18[2]"
    # str() keeps the spelling used in the input
    assert str(parse_type("uint")) == "uint"


def test_bits():
    assert parse_type("uint8").bits == 8
    assert parse_type("int136[]").bits == 136
    assert parse_type("bytes4").bits == 32
    assert parse_type("fixed64x10").bits == 64
    assert parse_type("bytes").bits is None
    assert parse_type("address").bits is None


def test_tuple_keyword_form():
    parsed = parse_type("tuple[2][]")
    assert parsed.is_tuple
    assert parsed.members is None
    assert parsed.dimensions == (2, None)


def test_inline_tuple():
    parsed = parse_type("(uint256,(bool,address)[])[3]")
    assert parsed.is_tuple
    assert parsed.dimensions == (3,)
    assert [str(m) for m in parsed.members] == ["uint256", "(bool,address)[]"]
    inner = parsed.members[1]
    assert inner.dimensions == (None,)
    assert [m.base for m in inner.members] == ["bool", "address"]
    assert parse_type("(uint,(int8,fixed))").canonical() == "(uint256,(int8,fixed128x18))"


@pytest.mark.parametrize(
    "type_str",
    ["(uint256,", "(uint256))", "(tuple)", "(uint7)", "(uint256;bool)", "(uint256,)", "uint256(", "(bool)[01]"],
)
def test_invalid_inline_tuples(type_str):
    with pytest.raises(InvalidTypeString):
        parse_type(type_str)


def test_parse_rejects_non_strings():
    with pytest.raises(InvalidTypeString):
        parse_type(123)


def test_inline_tuple_depth_cap():
    nested = "(" * 5 + "uint8" + ")" * 5
    assert str(parse_type(nested, max_depth=5)) == nested
    with pytest.raises(TypeNestingTooDeep) as exc_info:
        parse_type(nested, max_depth=4)
    assert exc_info.value.max_depth == 4


def test_pathological_nesting_hits_the_cap_not_the_stack():
    with pytest.raises(TypeNestingTooDeep):
        parse_type("(" * 50_000 + "bool" + ")" * 50_000)
