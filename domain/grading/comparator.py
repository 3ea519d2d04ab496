"""Structural comparison of a submission's output against the expected value."""

import numbers
from typing import Any


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def compare_outputs(actual: Any, expected: Any) -> bool:
    """Deep equality over JSON-like values.

    - int and float are one numeric kind (``5 == 5.0``); bool is not a number
    - otherwise different runtime types never match (``True != 1``, ``"1" != 1``)
    - lists/tuples: same length, element-wise, order matters
    - dicts: same number of keys, every key present with an equal value
    - anything else: ``==``

    Recursion is unguarded: cyclic structures are not supported.
    """
    if _is_number(actual) and _is_number(expected):
        return actual == expected

    if type(actual) is not type(expected):
        return False

    if isinstance(actual, (list, tuple)):
        if len(actual) != len(expected):
            return False
        return all(compare_outputs(a, e) for a, e in zip(actual, expected))

    if isinstance(actual, dict):
        if len(actual) != len(expected):
            return False
        return all(key in expected and compare_outputs(value, expected[key]) for key, value in actual.items())

    return actual == expected
