"""
Metadata filter evaluation for Pinecone-style filter dicts.

Used by the in-process index; the pgvector backend compiles the same
syntax to SQL (see pgvector.py) and must agree with these semantics.
"""

import operator
from typing import Any, Callable

_MISSING = object()

LOGICAL_OPERATORS = {"$and", "$or"}

_COMPARISONS: dict[str, Callable[[Any, Any], bool]] = {
    "$gt": operator.gt,
    "$gte": operator.ge,
    "$lt": operator.lt,
    "$lte": operator.le,
}


class UnsupportedFilterError(ValueError):
    """Filter uses an operator the backends do not implement."""


def matches_filter(metadata: dict[str, Any], filter: dict[str, Any] | None) -> bool:
    """Evaluate a filter dict against one vector's metadata."""
    if not filter:
        return True

    for key, condition in filter.items():
        if key == "$and":
            if not all(matches_filter(metadata, sub) for sub in condition):
                return False
        elif key == "$or":
            if not any(matches_filter(metadata, sub) for sub in condition):
                return False
        elif key.startswith("$"):
            raise UnsupportedFilterError(f"Unsupported logical operator: {key}")
        elif not _match_field(metadata.get(key, _MISSING), condition):
            return False

    return True


def _match_field(value: Any, condition: Any) -> bool:
    # Bare values are shorthand for $eq
    if not isinstance(condition, dict):
        condition = {"$eq": condition}

    for op, operand in condition.items():
        if op == "$eq":
            ok = _equals(value, operand)
        elif op == "$ne":
            ok = not _equals(value, operand)
        elif op == "$in":
            ok = _contains_any(value, operand)
        elif op == "$nin":
            ok = not _contains_any(value, operand)
        elif op in _COMPARISONS:
            ok = (
                value is not _MISSING
                and value is not None
                and not isinstance(value, (list, str))
                and _COMPARISONS[op](value, operand)
            )
        else:
            raise UnsupportedFilterError(f"Unsupported field operator: {op}")

        if not ok:
            return False

    return True


def _equals(value: Any, operand: Any) -> bool:
    if value is _MISSING:
        return False
    if isinstance(value, list):
        return operand in value
    return value == operand


def _contains_any(value: Any, operands: list[Any]) -> bool:
    if value is _MISSING or value is None:
        return False
    if isinstance(value, list):
        return any(item in operands for item in value)
    return value in operands
