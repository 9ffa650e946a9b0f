"""
Top-level ABI validation: per-kind dispatch and collection.

Each raw item is routed on its ``type`` discriminant to the matching schema
in ITEM_SCHEMAS. ``validate_abi`` validates every item independently and
aggregates all issues (each path prefixed with the item index) instead of
stopping at the first failure.

Every call builds its own pydantic validation context, so the functions here
are pure and safe to call concurrently.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import ValidationError

from abi_schema import config
from abi_schema.engine.normalizer import find_state_mutability_conflict
from abi_schema.utils.errors import (
    AbiIssue,
    AbiValidationError,
    ErrorKind,
    PathElement,
    issues_from_pydantic,
)
from abi_schema.utils.schemas import (
    DEPTH_KEY,
    MAX_DEPTH_KEY,
    AbiConstructor,
    AbiError,
    AbiEvent,
    AbiFallback,
    AbiFunction,
    AbiItem,
    AbiItemType,
    AbiModel,
    AbiReceive,
)

logger = logging.getLogger(__name__)


ITEM_SCHEMAS: Dict[AbiItemType, Type[AbiModel]] = {
    AbiItemType.FUNCTION: AbiFunction,
    AbiItemType.CONSTRUCTOR: AbiConstructor,
    AbiItemType.FALLBACK: AbiFallback,
    AbiItemType.RECEIVE: AbiReceive,
    AbiItemType.EVENT: AbiEvent,
    AbiItemType.ERROR: AbiError,
}

# Kinds whose stateMutability may be derived from constant/payable
_LEGACY_MUTABILITY_KINDS = (AbiItemType.FUNCTION, AbiItemType.CONSTRUCTOR, AbiItemType.FALLBACK)


@dataclass
class AbiValidationResult:
    """
    Outcome of a non-raising validation.

    Attributes:
        items: Normalized items that validated, in input order.
        issues: Path-tagged errors from the items that did not.
        warnings: Non-fatal findings (e.g. ConflictingStateMutability).
    """

    items: List[AbiItem] = field(default_factory=list)
    issues: List[AbiIssue] = field(default_factory=list)
    warnings: List[AbiIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues


# ─────────────────────────────────────────────────────────────────────
# Dispatch
# ─────────────────────────────────────────────────────────────────────

def _looks_like_legacy_function(raw: Dict[str, Any]) -> bool:
    """Typeless item that can only be a function in the pre-discriminant ABI format."""
    if "name" not in raw or not isinstance(raw.get("inputs"), list):
        return False
    if "anonymous" in raw:
        return False
    if any(isinstance(inp, dict) and "indexed" in inp for inp in raw["inputs"]):
        return False
    return "outputs" in raw or "constant" in raw or "payable" in raw


def _resolve_item_type(
    raw: Any,
    path: Tuple[PathElement, ...],
    allow_typeless: bool,
) -> Tuple[Optional[AbiItemType], Any, Optional[AbiIssue]]:
    """Returns (kind, raw item to validate, issue)."""
    if not isinstance(raw, dict):
        issue = AbiIssue(path, ErrorKind.INVALID_FIELD, "ABI item must be an object", raw)
        return None, raw, issue

    raw_type = raw.get("type")
    if raw_type is None:
        if allow_typeless and _looks_like_legacy_function(raw):
            logger.debug("Treating typeless item %r at %s as a legacy function", raw.get("name"), path)
            return AbiItemType.FUNCTION, {**raw, "type": AbiItemType.FUNCTION.value}, None
        issue = AbiIssue(
            path + ("type",),
            ErrorKind.UNKNOWN_ITEM_KIND,
            "Missing item type and the item is not an unambiguous legacy function",
            None,
        )
        return None, raw, issue

    try:
        return AbiItemType(raw_type), raw, None
    except ValueError:
        expected = ", ".join(repr(t.value) for t in AbiItemType)
        issue = AbiIssue(
            path + ("type",),
            ErrorKind.UNKNOWN_ITEM_KIND,
            f"Unknown item type {raw_type!r} (expected one of {expected})",
            raw_type,
        )
        return None, raw, issue


def _validate_one(
    raw: Any,
    path: Tuple[PathElement, ...],
    max_depth: int,
    allow_typeless: bool,
    result: AbiValidationResult,
) -> None:
    """Validate a single item, appending to either result.items or result.issues."""
    kind, item_data, issue = _resolve_item_type(raw, path, allow_typeless)
    if issue is not None:
        result.issues.append(issue)
        return

    schema = ITEM_SCHEMAS[kind]
    context = {DEPTH_KEY: 0, MAX_DEPTH_KEY: max_depth}
    try:
        item = schema.model_validate(item_data, context=context)
    except ValidationError as exc:
        result.issues.extend(issues_from_pydantic(exc, prefix=path))
        return

    if kind in _LEGACY_MUTABILITY_KINDS:
        conflict = find_state_mutability_conflict(item_data)
        if conflict:
            logger.warning("ABI item at %s: %s; keeping explicit stateMutability", path or "<root>", conflict)
            result.warnings.append(
                AbiIssue(
                    path + ("stateMutability",),
                    ErrorKind.CONFLICTING_STATE_MUTABILITY,
                    conflict,
                    item_data.get("stateMutability"),
                )
            )
    result.items.append(item)


def _settings(max_depth: Optional[int], allow_typeless: Optional[bool]) -> Tuple[int, bool]:
    return (
        config.MAX_NESTING_DEPTH if max_depth is None else max_depth,
        config.ALLOW_TYPELESS_ITEMS if allow_typeless is None else allow_typeless,
    )


# ─────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────

def safe_validate_item(
    raw: Any,
    *,
    max_depth: Optional[int] = None,
    allow_typeless: Optional[bool] = None,
) -> AbiValidationResult:
    """Validate one ABI item without raising. Paths are relative to the item."""
    depth, typeless = _settings(max_depth, allow_typeless)
    result = AbiValidationResult()
    _validate_one(raw, (), depth, typeless, result)
    return result


def validate_item(
    raw: Any,
    *,
    max_depth: Optional[int] = None,
    allow_typeless: Optional[bool] = None,
) -> AbiItem:
    """
    Validate and normalize one ABI item.

    Returns:
        The item's schema instance, with stateMutability present where the kind has one.

    Raises:
        AbiValidationError: with every issue found in the item.
    """
    result = safe_validate_item(raw, max_depth=max_depth, allow_typeless=allow_typeless)
    if result.issues:
        raise AbiValidationError(result.issues)
    return result.items[0]


def safe_validate_abi(
    raw_sequence: Any,
    *,
    max_depth: Optional[int] = None,
    allow_typeless: Optional[bool] = None,
) -> AbiValidationResult:
    """
    Validate every item of an ABI without raising.

    Valid items are still collected when others fail; each item contributes to
    either ``items`` or ``issues``, never both. Issue paths start with the item index.
    """
    depth, typeless = _settings(max_depth, allow_typeless)
    result = AbiValidationResult()
    if not isinstance(raw_sequence, list):
        result.issues.append(AbiIssue((), ErrorKind.INVALID_FIELD, "ABI must be a list of items", raw_sequence))
        return result

    for index, raw in enumerate(raw_sequence):
        _validate_one(raw, (index,), depth, typeless, result)

    logger.debug(
        "Validated ABI: %d item(s), %d valid, %d issue(s), %d warning(s)",
        len(raw_sequence),
        len(result.items),
        len(result.issues),
        len(result.warnings),
    )
    return result


def validate_abi(
    raw_sequence: Any,
    *,
    max_depth: Optional[int] = None,
    allow_typeless: Optional[bool] = None,
) -> List[AbiItem]:
    """
    Validate and normalize a whole ABI, preserving item order.

    Raises:
        AbiValidationError: with the issues of every failing item.
    """
    result = safe_validate_abi(raw_sequence, max_depth=max_depth, allow_typeless=allow_typeless)
    if result.issues:
        raise AbiValidationError(result.issues)
    return result.items


def normalize_abi(raw_sequence: Any, **kwargs: Any) -> List[Dict[str, Any]]:
    """Validate an ABI and dump it back to canonical JSON dicts."""
    return [item.to_json_dict() for item in validate_abi(raw_sequence, **kwargs)]
