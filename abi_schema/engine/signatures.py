"""
Canonical signatures for validated ABI items.

Tuple parameters are expanded to their inline form (``(address,uint24)[]``)
and type aliases are spelled out (``uint`` -> ``uint256``), which is the form
selectors and event topics are hashed from.
"""

from typing import Any, Dict, Union

from eth_utils import (
    collapse_if_tuple,
    encode_hex,
    event_signature_to_log_topic,
    function_signature_to_4byte_selector,
)

from abi_schema.engine.solidity_types import is_tuple_form, parse_type
from abi_schema.utils.schemas import AbiError, AbiEvent, AbiFunction, AbiParameter


def _canonicalize(param: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a parameter dict with alias types expanded, recursively."""
    canonical = dict(param)
    if is_tuple_form(param["type"]):
        canonical["components"] = [_canonicalize(c) for c in param.get("components", [])]
    else:
        canonical["type"] = parse_type(param["type"]).canonical()
    return canonical


def canonical_type(param: Union[AbiParameter, Dict[str, Any]]) -> str:
    """
    Canonical ABI type of a parameter.

    Example:
        {"type": "tuple[]", "components": [{"type": "address"}, {"type": "uint"}]}
        -> "(address,uint256)[]"
    """
    data = param.to_json_dict() if isinstance(param, AbiParameter) else param
    return collapse_if_tuple(_canonicalize(data))


def format_signature(item: Union[AbiFunction, AbiEvent, AbiError]) -> str:
    """``name(type1,type2,...)`` for a function, event or error."""
    types = ",".join(canonical_type(p) for p in item.inputs)
    return f"{item.name}({types})"


def function_selector(item: Union[AbiFunction, AbiError]) -> str:
    """4-byte selector as 0x-prefixed hex (custom errors use the same scheme)."""
    return encode_hex(function_signature_to_4byte_selector(format_signature(item)))


def event_topic(item: AbiEvent) -> str:
    """keccak256 of the event signature (topic 0 for non-anonymous events)."""
    return encode_hex(event_signature_to_log_topic(format_signature(item)))
