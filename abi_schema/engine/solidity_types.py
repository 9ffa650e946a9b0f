"""
Solidity type-string grammar.

Recognises the type strings that appear in ABI ``type`` fields and in
canonical signatures:

  elementary   address, bool, string, bytes, function,
               int<W>/uint<W>   W = 8..256 step 8 (bare int/uint = 256 bits)
               bytes<N>         N = 1..32
               fixed<M>x<N>/ufixed<M>x<N>  M = 8..256 step 8, N = 0..80
  arrays       any type followed by "[k]" or "[]", repeatable ("uint8[2][]")
  tuple form   "tuple" plus array suffixes; the shape lives in ``components``
  inline tuple "(t1,t2,...)" plus array suffixes, as used in signatures

The flat (non-tuple) case is a single anchored regex, which is the hot path
for ABI validation. Tuple-form strings are recognised by prefix only; their
structure is checked through ``components`` by the parameter schema. Inline
tuples are decomposed by a small recursive-descent parser with a depth cap.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from abi_schema import config


# ─────────────────────────────────────────────────────────────────────
# Patterns
# ─────────────────────────────────────────────────────────────────────

_INT_WIDTHS = "|".join(str(w) for w in range(256, 7, -8))
_BYTES_SIZES = "|".join(str(n) for n in range(32, 0, -1))
_FIXED_PRECISIONS = "|".join(str(n) for n in range(80, -1, -1))

# "[]" or "[k]" where k has no leading zeros ("0" itself is allowed)
_ARRAY_SUFFIX = r"\[(?:0|[1-9][0-9]*)?\]"

_ELEMENTARY = (
    r"(?:address|bool|string|function"
    rf"|bytes(?:{_BYTES_SIZES})?"
    rf"|u?int(?:{_INT_WIDTHS})?"
    rf"|u?fixed(?:(?:{_INT_WIDTHS})x(?:{_FIXED_PRECISIONS}))?)"
)

_SOLIDITY_TYPE_REGEX = re.compile(rf"{_ELEMENTARY}(?:{_ARRAY_SUFFIX})*")
_TUPLE_FORM_REGEX = re.compile(rf"tuple(?:{_ARRAY_SUFFIX})*")
_ARRAY_SUFFIXES_REGEX = re.compile(rf"(?:{_ARRAY_SUFFIX})*")
_DIMENSION_REGEX = re.compile(r"\[([0-9]*)\]")
_DECOMPOSE_REGEX = re.compile(r"(?P<base>[a-z]+)(?P<sub>[0-9]+(?:x[0-9]+)?)?(?P<arrays>(?:\[[0-9]*\])*)")
_TOKEN_REGEX = re.compile(r"[^,()]+")

# Size suffix implied by the bare alias
_DEFAULT_SUBS = {
    "int": "256",
    "uint": "256",
    "fixed": "128x18",
    "ufixed": "128x18",
}


class InvalidTypeString(ValueError):
    """A string that is not a Solidity type reference."""

    def __init__(self, type_str: object, reason: Optional[str] = None):
        self.type_str = type_str
        message = f"Invalid Solidity type: {type_str!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class TypeNestingTooDeep(InvalidTypeString):
    """Inline tuple nesting exceeded the configured depth cap."""

    def __init__(self, type_str: str, max_depth: int):
        self.max_depth = max_depth
        super().__init__(type_str, f"tuple nesting deeper than {max_depth}")


# ─────────────────────────────────────────────────────────────────────
# Parsed representation
# ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SolidityType:
    """
    Decomposed Solidity type.

    Attributes:
        base: Type name without size, e.g. "uint", "bytes", "address", "tuple".
        sub: Size suffix as written, e.g. "256", "32", "128x18" ("" when bare).
        dimensions: Array dimensions, innermost first; None marks a dynamic "[]".
        members: Inline tuple members; None for every non-inline type
            (including the "tuple" keyword form, whose shape is in components).
    """

    base: str
    sub: str = ""
    dimensions: Tuple[Optional[int], ...] = ()
    members: Optional[Tuple["SolidityType", ...]] = None

    @property
    def is_tuple(self) -> bool:
        return self.base == "tuple"

    @property
    def is_array(self) -> bool:
        return bool(self.dimensions)

    @property
    def bits(self) -> Optional[int]:
        """Bit width for int/uint/fixed/ufixed/bytesN, with bare aliases resolved."""
        sub = self.sub or _DEFAULT_SUBS.get(self.base, "")
        if self.base in ("int", "uint", "fixed", "ufixed"):
            return int(sub.split("x")[0])
        if self.base == "bytes" and sub:
            return int(sub) * 8
        return None

    def element_type(self) -> "SolidityType":
        """Type of one array element (drops the outermost dimension)."""
        if not self.dimensions:
            raise ValueError(f"{self} is not an array type")
        return SolidityType(self.base, self.sub, self.dimensions[:-1], self.members)

    def canonical(self) -> str:
        """Signature form: aliases expanded, e.g. ``uint[]`` -> ``uint256[]``."""
        if self.members is not None:
            head = "(" + ",".join(m.canonical() for m in self.members) + ")"
        else:
            head = self.base + (self.sub or _DEFAULT_SUBS.get(self.base, ""))
        return head + _format_dimensions(self.dimensions)

    def __str__(self) -> str:
        if self.members is not None:
            head = "(" + ",".join(str(m) for m in self.members) + ")"
        else:
            head = self.base + self.sub
        return head + _format_dimensions(self.dimensions)


def _format_dimensions(dimensions: Tuple[Optional[int], ...]) -> str:
    return "".join("[]" if d is None else f"[{d}]" for d in dimensions)


def _parse_dimensions(suffix: str) -> Tuple[Optional[int], ...]:
    return tuple(int(d) if d else None for d in _DIMENSION_REGEX.findall(suffix))


# ─────────────────────────────────────────────────────────────────────
# Recognisers
# ─────────────────────────────────────────────────────────────────────

def is_solidity_type(type_str: object) -> bool:
    """True for elementary types with optional array suffixes (no tuples)."""
    return isinstance(type_str, str) and _SOLIDITY_TYPE_REGEX.fullmatch(type_str) is not None


def is_tuple_form(type_str: object) -> bool:
    """True for "tuple" and "tuple[...]" strings (prefix test only)."""
    return isinstance(type_str, str) and (type_str == "tuple" or type_str.startswith("tuple["))


def validate_parameter_type(type_str: object) -> bool:
    """
    Check an ABI parameter ``type`` field.

    Returns:
        True when the type is a tuple form, i.e. ``components`` must be supplied.

    Raises:
        InvalidTypeString: the value is not an elementary or tuple-form type.
    """
    if is_tuple_form(type_str):
        if _TUPLE_FORM_REGEX.fullmatch(type_str) is None:
            raise InvalidTypeString(type_str, "malformed array suffix")
        return True
    if not is_solidity_type(type_str):
        raise InvalidTypeString(type_str)
    return False


# ─────────────────────────────────────────────────────────────────────
# Parser
# ─────────────────────────────────────────────────────────────────────

def parse_type(type_str: str, max_depth: Optional[int] = None) -> SolidityType:
    """
    Decompose a type string. ``str(parse_type(s)) == s`` for every valid ``s``.

    Args:
        type_str: Elementary, tuple-form or inline-tuple type string.
        max_depth: Maximum inline tuple nesting (defaults to config.MAX_NESTING_DEPTH).

    Raises:
        InvalidTypeString: the string is not a valid type.
        TypeNestingTooDeep: inline tuples nest deeper than ``max_depth``.
    """
    if not isinstance(type_str, str):
        raise InvalidTypeString(type_str, "not a string")
    limit = config.MAX_NESTING_DEPTH if max_depth is None else max_depth
    if is_tuple_form(type_str):
        validate_parameter_type(type_str)
        return SolidityType("tuple", "", _parse_dimensions(type_str[len("tuple"):]))
    parsed, end = _parse_at(type_str, 0, 0, limit)
    if end != len(type_str):
        raise InvalidTypeString(type_str, f"unexpected {type_str[end]!r} at position {end}")
    return parsed


def _parse_at(text: str, pos: int, depth: int, limit: int) -> Tuple[SolidityType, int]:
    if text.startswith("(", pos):
        if depth >= limit:
            raise TypeNestingTooDeep(text, limit)
        pos += 1
        members: List[SolidityType] = []
        if text.startswith(")", pos):
            pos += 1
        else:
            while True:
                member, pos = _parse_at(text, pos, depth + 1, limit)
                members.append(member)
                if text.startswith(",", pos):
                    pos += 1
                elif text.startswith(")", pos):
                    pos += 1
                    break
                else:
                    raise InvalidTypeString(text, f"expected ',' or ')' at position {pos}")
        suffix = _ARRAY_SUFFIXES_REGEX.match(text, pos)
        return SolidityType("tuple", "", _parse_dimensions(suffix.group(0)), tuple(members)), suffix.end()

    token_match = _TOKEN_REGEX.match(text, pos)
    if token_match is None or not is_solidity_type(token_match.group(0)):
        token = token_match.group(0) if token_match else ""
        raise InvalidTypeString(text, f"bad element {token!r} at position {pos}")
    parts = _DECOMPOSE_REGEX.fullmatch(token_match.group(0))
    parsed = SolidityType(parts["base"], parts["sub"] or "", _parse_dimensions(parts["arrays"]))
    return parsed, token_match.end()
