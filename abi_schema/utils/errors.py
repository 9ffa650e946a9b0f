"""
Structured validation failures.

Every failure is an ``AbiIssue``: a path into the raw JSON (list indices and
field names), an ``ErrorKind``, a human-readable message and the offending
value. Pydantic errors raised by the item schemas are converted here so that
callers never have to look at pydantic's own error format.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Tuple, Union

from pydantic import ValidationError

PathElement = Union[int, str]


class ErrorKind(str, Enum):
    """
    Categories of ABI validation failures.
    """

    INVALID_TYPE_STRING = "InvalidTypeString"
    MISSING_COMPONENTS = "MissingComponents"
    UNKNOWN_ITEM_KIND = "UnknownItemKind"
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    # Reported as a warning only: the explicit stateMutability wins.
    CONFLICTING_STATE_MUTABILITY = "ConflictingStateMutability"
    MAX_DEPTH_EXCEEDED = "MaxDepthExceeded"
    INVALID_FIELD = "InvalidField"


# pydantic error ``type`` -> ErrorKind. Custom types are raised by utils/schemas.py.
_PYDANTIC_ERROR_KINDS: Dict[str, ErrorKind] = {
    "invalid_type_string": ErrorKind.INVALID_TYPE_STRING,
    "missing_components": ErrorKind.MISSING_COMPONENTS,
    "max_depth_exceeded": ErrorKind.MAX_DEPTH_EXCEEDED,
    "missing": ErrorKind.MISSING_REQUIRED_FIELD,
}


@dataclass(frozen=True)
class AbiIssue:
    """
    A single path-tagged validation failure (or warning).

    Attributes:
        path: Location in the raw input, e.g. ``(0, "inputs", 0, "type")``.
        kind: Failure category.
        message: Human-readable description.
        offending_value: The rejected value (None for missing fields).
    """

    path: Tuple[PathElement, ...]
    kind: ErrorKind
    message: str
    offending_value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": list(self.path),
            "kind": self.kind.value,
            "message": self.message,
            "offendingValue": self.offending_value,
        }

    def __str__(self) -> str:
        where = ".".join(str(p) for p in self.path) or "<root>"
        return f"{where}: [{self.kind.value}] {self.message}"


class AbiValidationError(ValueError):
    """Raised by the validating entry points; carries every collected issue."""

    def __init__(self, issues: Iterable[AbiIssue]):
        self.issues: List[AbiIssue] = list(issues)
        lines = "\n".join(f"  {issue}" for issue in self.issues)
        super().__init__(f"{len(self.issues)} ABI validation issue(s):\n{lines}")

    @property
    def kinds(self) -> List[ErrorKind]:
        return [issue.kind for issue in self.issues]


def issues_from_pydantic(exc: ValidationError, prefix: Tuple[PathElement, ...] = ()) -> List[AbiIssue]:
    """
    Convert a pydantic ``ValidationError`` into ``AbiIssue``s, keeping order.

    Args:
        exc: The error raised by one of the item schemas.
        prefix: Path of the validated value inside the caller's input
            (e.g. the item index within an ABI list).

    Returns:
        One issue per pydantic error entry.
    """
    issues: List[AbiIssue] = []
    for err in exc.errors(include_url=False):
        kind = _PYDANTIC_ERROR_KINDS.get(err["type"], ErrorKind.INVALID_FIELD)
        offending = None if kind is ErrorKind.MISSING_REQUIRED_FIELD else err.get("input")
        issues.append(
            AbiIssue(
                path=prefix + tuple(err["loc"]),
                kind=kind,
                message=err["msg"],
                offending_value=offending,
            )
        )
    return issues
