"""
Tests for deprecated-field normalization.
"""

import copy

import pytest

from abi_schema.engine.normalizer import (
    derive_state_mutability,
    find_state_mutability_conflict,
    with_receive_state_mutability,
    with_state_mutability,
)


@pytest.mark.parametrize(
    "constant, payable, expected",
    [
        (True, None, "view"),
        (True, False, "view"),
        (True, True, "view"),
        (None, True, "payable"),
        (False, True, "payable"),
        (False, False, "nonpayable"),
        (None, None, "nonpayable"),
    ],
)
def test_derive_state_mutability(constant, payable, expected):
    assert derive_state_mutability(constant, payable) == expected


def test_explicit_state_mutability_is_kept():
    data = {"type": "function", "constant": True, "stateMutability": "pure"}
    assert with_state_mutability(data) is data


def test_derived_value_keeps_deprecated_fields_and_input_untouched():
    data = {"type": "function", "constant": False, "payable": True, "name": "deposit"}
    original = copy.deepcopy(data)

    normalized = with_state_mutability(data)

    assert normalized == {**original, "stateMutability": "payable"}
    assert data == original


def test_null_state_mutability_is_derived():
    assert with_state_mutability({"stateMutability": None, "constant": True})["stateMutability"] == "view"


def test_non_dict_input_passes_through():
    assert with_state_mutability(["not", "an", "item"]) == ["not", "an", "item"]
    assert with_receive_state_mutability("receive") == "receive"


def test_receive_is_always_payable():
    assert with_receive_state_mutability({"type": "receive"})["stateMutability"] == "payable"
    data = {"type": "receive", "stateMutability": "view", "payable": False}
    assert with_receive_state_mutability(data) == {"type": "receive", "stateMutability": "payable", "payable": False}
    assert data["stateMutability"] == "view"


@pytest.mark.parametrize(
    "data",
    [
        {"constant": True, "stateMutability": "nonpayable"},
        {"constant": True, "stateMutability": "payable"},
        {"payable": True, "stateMutability": "view"},
        {"payable": False, "stateMutability": "payable"},
    ],
)
def test_conflicts_are_described(data):
    assert find_state_mutability_conflict(data)


@pytest.mark.parametrize(
    "data",
    [
        {"constant": True, "stateMutability": "view"},
        {"constant": True, "payable": False, "stateMutability": "pure"},
        {"payable": True, "stateMutability": "payable"},
        {"constant": False, "payable": False, "stateMutability": "nonpayable"},
        {"constant": True},
        {"stateMutability": "view"},
        "not a dict",
    ],
)
def test_agreeing_fields_have_no_conflict(data):
    assert find_state_mutability_conflict(data) is None
