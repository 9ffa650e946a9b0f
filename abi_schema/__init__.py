"""Validation and normalization of smart-contract ABI descriptions."""

from abi_schema.engine.solidity_types import (
    InvalidTypeString,
    SolidityType,
    TypeNestingTooDeep,
    is_solidity_type,
    is_tuple_form,
    parse_type,
)
from abi_schema.engine.normalizer import derive_state_mutability
from abi_schema.engine.validator import (
    AbiValidationResult,
    normalize_abi,
    safe_validate_abi,
    safe_validate_item,
    validate_abi,
    validate_item,
)
from abi_schema.utils.errors import AbiIssue, AbiValidationError, ErrorKind
from abi_schema.utils.schemas import (
    AbiConstructor,
    AbiError,
    AbiEvent,
    AbiEventParameter,
    AbiFallback,
    AbiFunction,
    AbiItem,
    AbiItemType,
    AbiParameter,
    AbiReceive,
)

__version__ = "0.1.0"
