"""
Pydantic schemas for contract ABI items.

One model per ABI item kind (function, constructor, fallback, receive, event,
error) plus the recursive parameter model. The models validate field presence
and JSON types, check every parameter ``type`` against the Solidity grammar,
and derive ``stateMutability`` from the deprecated ``constant``/``payable``
booleans before the required-field check runs.

Models are frozen and dump back to the ABI's camelCase JSON shape via
``to_json_dict()``.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError
from pydantic_core.core_schema import ValidatorFunctionWrapHandler

from abi_schema import config
from abi_schema.engine.normalizer import with_receive_state_mutability, with_state_mutability
from abi_schema.engine.solidity_types import InvalidTypeString, is_tuple_form, validate_parameter_type


_IDENTIFIER_REGEX = re.compile(r"^[a-zA-Z$_][a-zA-Z0-9$_]*$")

# Keys stored in the per-call pydantic validation context
DEPTH_KEY = "depth"
MAX_DEPTH_KEY = "max_depth"


def _require_identifier(value: str) -> str:
    """
    Validate that `value` is a Solidity identifier:
    a letter, `$` or `_` followed by letters, digits, `$` or `_`.
    """
    if not _IDENTIFIER_REGEX.fullmatch(value):
        raise ValueError(f"Invalid identifier {value!r}")
    return value


def _require_solidity_type(value: str) -> str:
    try:
        validate_parameter_type(value)
    except InvalidTypeString:
        raise PydanticCustomError(
            "invalid_type_string",
            "Invalid Solidity type '{type}'",
            {"type": value},
        ) from None
    return value


def _raise_too_deep(max_depth: int) -> None:
    raise PydanticCustomError(
        "max_depth_exceeded",
        "Parameter nesting deeper than {max_depth}",
        {"max_depth": max_depth},
    )


def _nesting_depth(data: Any) -> int:
    """Levels of tuple components in a raw parameter (the parameter itself is 1)."""
    depth = 0
    level = [data]
    while level:
        depth += 1
        level = [
            component
            for param in level
            if isinstance(param, dict) and is_tuple_form(param.get("type")) and isinstance(param.get("components"), list)
            for component in param["components"]
        ]
    return depth


StateMutability =Literal["pure", "view", "nonpayable", "payable"]
PayableStateMutability = Literal["nonpayable", "payable"]


class AbiItemType(str, Enum):
    """
    ABI item kinds (values of the ``type`` discriminant).
    """

    FUNCTION = "function"
    CONSTRUCTOR = "constructor"
    FALLBACK = "fallback"
    RECEIVE = "receive"
    EVENT = "event"
    ERROR = "error"


class AbiModel(BaseModel):
    """
    Base for all ABI schemas: camelCase aliases, immutable, unknown keys dropped.
    """

    model_config = ConfigDict(alias_generator=to_camel, frozen=True, extra="ignore")

    def to_json_dict(self) -> Dict[str, Any]:
        """Dump to the ABI JSON shape, omitting absent optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ─────────────────────────────────────────────────────────────────────
# Parameters
# ─────────────────────────────────────────────────────────────────────

class AbiParameter(AbiModel):
    """
    A function/error input or output, or a tuple component.

    Attributes:
        name: Parameter name ("" for unnamed).
        type: Solidity type string, e.g. "uint256", "address[]", "tuple[2][]".
        internal_type: Compiler-specific type, e.g. "struct Pool.Key" (not checked).
        components: Tuple members; required for tuple forms, dropped otherwise.
    """

    name: Optional[StrictStr] = None
    type: StrictStr
    internal_type: Optional[StrictStr] = None
    components: Optional[List[AbiParameter]] = Field(default=None, validate_default=True)

    @model_validator(mode="wrap")
    @classmethod
    def _guard_depth(cls, data: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo) -> Any:
        # Per-call depth counter lives in the validation context.
        context = info.context
        if not isinstance(context, dict):
            # Direct model_validate() without context: measure the raw input instead.
            if _nesting_depth(data) > config.MAX_NESTING_DEPTH:
                _raise_too_deep(config.MAX_NESTING_DEPTH)
            return handler(data)
        depth = context.get(DEPTH_KEY, 0) + 1
        max_depth = context.get(MAX_DEPTH_KEY, config.MAX_NESTING_DEPTH)
        if depth > max_depth:
            _raise_too_deep(max_depth)
        context[DEPTH_KEY] = depth
        try:
            return handler(data)
        finally:
            context[DEPTH_KEY] = depth - 1

    @model_validator(mode="before")
    @classmethod
    def _drop_non_tuple_components(cls, data: Any) -> Any:
        # components only describe tuple forms; anything else is never looked at
        if isinstance(data, dict) and "components" in data and not is_tuple_form(data.get("type")):
            return {key: value for key, value in data.items() if key != "components"}
        return data

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return v
        return _require_identifier(v)

    @field_validator("type")
    @classmethod
    def _validate_type(cls, v: str) -> str:
        return _require_solidity_type(v)

    @field_validator("components")
    @classmethod
    def _validate_components(cls, v: Optional[List[AbiParameter]], info: ValidationInfo) -> Optional[List[AbiParameter]]:
        solidity_type = info.data.get("type")
        if solidity_type is None:
            # type already failed; nothing to cross-check
            return v
        if not is_tuple_form(solidity_type):
            return None
        if v is None:
            raise PydanticCustomError(
                "missing_components",
                "Tuple type '{type}' requires components",
                {"type": solidity_type},
            )
        return v


class AbiEventParameter(AbiParameter):
    """
    Event input; may be indexed (stored as a log topic).
    """

    indexed: Optional[StrictBool] = None


# ─────────────────────────────────────────────────────────────────────
# Items
# ─────────────────────────────────────────────────────────────────────

class NamedAbiItem(AbiModel):
    """
    Base for items addressed by name (functions, events, errors).
    Duplicate names across items are allowed (overloads).
    """

    name: StrictStr

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str) -> str:
        return _require_identifier(v)


class AbiFunction(NamedAbiItem):
    """
    A callable contract function.

    ``stateMutability`` is derived from the deprecated ``constant``/``payable``
    fields when absent; the deprecated fields are kept as given. ``gas`` is a
    legacy Vyper field.
    """

    type: Literal["function"]
    inputs: List[AbiParameter]
    outputs: List[AbiParameter]
    state_mutability: StateMutability
    constant: Optional[StrictBool] = None
    payable: Optional[StrictBool] = None
    gas: Optional[StrictInt] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_legacy_fields(cls, data: Any) -> Any:
        return with_state_mutability(data)


class AbiConstructor(AbiModel):
    """
    The contract constructor. Only nonpayable or payable.
    """

    type: Literal["constructor"]
    inputs: List[AbiParameter]
    state_mutability: PayableStateMutability
    payable: Optional[StrictBool] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_legacy_fields(cls, data: Any) -> Any:
        return with_state_mutability(data)


class AbiFallback(AbiModel):
    """
    The fallback handler. ``inputs``, if present, must be empty.
    """

    type: Literal["fallback"]
    inputs: Optional[List[AbiParameter]] = None
    state_mutability: PayableStateMutability
    payable: Optional[StrictBool] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_legacy_fields(cls, data: Any) -> Any:
        return with_state_mutability(data)

    @field_validator("inputs")
    @classmethod
    def _validate_inputs(cls, v: Optional[List[AbiParameter]]) -> Optional[List[AbiParameter]]:
        if v:
            raise ValueError("fallback takes no inputs")
        return v


class AbiReceive(AbiModel):
    """
    The plain-ether receive handler; always payable.
    """

    type: Literal["receive"]
    state_mutability: Literal["payable"]

    @model_validator(mode="before")
    @classmethod
    def _force_payable(cls, data: Any) -> Any:
        return with_receive_state_mutability(data)


class AbiEvent(NamedAbiItem):
    type: Literal["event"]
    inputs: List[AbiEventParameter]
    anonymous: Optional[StrictBool] = None


class AbiError(NamedAbiItem):
    type: Literal["error"]
    inputs: List[AbiParameter]


AbiItem = Union[AbiFunction, AbiConstructor, AbiFallback, AbiReceive, AbiEvent, AbiError]
