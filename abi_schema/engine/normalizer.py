"""
Deprecated-field normalization.

Older compilers described mutability with the booleans ``constant`` and
``payable``; current ABIs use ``stateMutability``. These helpers derive the
modern field from the legacy ones. They run as a pre-pass (pydantic
``mode="before"``) so a legacy item is never rejected for lacking
``stateMutability``. Deprecated fields are left in place.

All functions are pure: they return a new dict and never touch their input.
"""

from typing import Any, Dict, Optional

NONPAYABLE = "nonpayable"
PAYABLE = "payable"
PURE = "pure"
VIEW = "view"


def derive_state_mutability(constant: Any = None, payable: Any = None) -> str:
    """
    Map the deprecated booleans onto a stateMutability value.

    constant=True -> "view"; else payable=True -> "payable"; else "nonpayable".
    """
    if constant is True:
        return VIEW
    if payable is True:
        return PAYABLE
    return NONPAYABLE


def with_state_mutability(data: Any) -> Any:
    """Fill in ``stateMutability`` from deprecated fields when it is missing."""
    if not isinstance(data, dict) or data.get("stateMutability") is not None:
        return data
    normalized: Dict[str, Any] = dict(data)
    normalized["stateMutability"] = derive_state_mutability(data.get("constant"), data.get("payable"))
    return normalized


def with_receive_state_mutability(data: Any) -> Any:
    """Receive handlers are payable whatever the input says."""
    if not isinstance(data, dict):
        return data
    normalized: Dict[str, Any] = dict(data)
    normalized["stateMutability"] = PAYABLE
    return normalized


def find_state_mutability_conflict(data: Any) -> Optional[str]:
    """
    Describe how an explicit ``stateMutability`` contradicts ``constant``/``payable``.

    Returns:
        A message, or None when the fields agree (or nothing is explicit).
        The explicit value always wins; callers only report this as a warning.
    """
    if not isinstance(data, dict):
        return None
    state_mutability = data.get("stateMutability")
    if state_mutability is None:
        return None
    constant = data.get("constant")
    payable = data.get("payable")
    if constant is True and state_mutability not in (VIEW, PURE):
        return f"constant=true contradicts stateMutability={state_mutability!r}"
    if payable is True and state_mutability != PAYABLE:
        return f"payable=true contradicts stateMutability={state_mutability!r}"
    if payable is False and state_mutability == PAYABLE:
        return "payable=false contradicts stateMutability='payable'"
    return None
