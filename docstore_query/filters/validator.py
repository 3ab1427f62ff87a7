#!/usr/bin/env python3
"""
Pre-flight validation for filter values and pagination parameters.
Runs before any expression is compiled or any backend call is made.
"""

from collections.abc import Mapping
from typing import Any, Optional

from ..exceptions import FieldNameError, ValidationError
from ..models import PaginationQuery

# Prefix the document store reserves for operator keys
RESERVED_PREFIX = "$"

PAGINATION_FIELDS = ("page", "limit", "offset")

SEQUENCE_TYPES = (list, tuple, set, frozenset)
CONTAINER_TYPES = (Mapping,) + SEQUENCE_TYPES


def validate_value(value: Any) -> None:
    """
    Reject a filter value that could inject backend operators.

    Mappings are scanned for keys starting with the reserved operator
    prefix; mappings and sequences are walked to any depth. The walk keeps
    its own stack, so nesting is bounded only by memory. Strings are not
    inspected.

    Args:
        value: The filter value

    Raises:
        ValidationError: If an unsafe key is found
    """
    pending = [value]
    seen = set()
    while pending:
        current = pending.pop()
        if not isinstance(current, CONTAINER_TYPES):
            continue
        # Self-referencing containers are walked once
        if id(current) in seen:
            continue
        seen.add(id(current))

        if isinstance(current, Mapping):
            for key, item in current.items():
                key = str(key)
                if key.startswith(RESERVED_PREFIX):
                    raise ValidationError(
                        f"Invalid filter value: key '{key}' starts with reserved prefix '{RESERVED_PREFIX}'"
                    )
                pending.append(item)
        else:
            pending.extend(current)


def validate_field_name(field: Any) -> None:
    """
    Reject a field name that is empty or contains the reserved prefix.

    Raises:
        FieldNameError: If the field name is unusable
    """
    if not isinstance(field, str) or not field:
        raise FieldNameError(f"Invalid field name: {field!r}")
    if RESERVED_PREFIX in field:
        raise FieldNameError(
            f'Invalid field name: Field names cannot contain "{RESERVED_PREFIX}"'
        )


def validate_pagination(pagination: Optional[PaginationQuery]) -> None:
    """
    Check that page, limit and offset are exact non-negative integers.

    Integral floats such as 2.0 are accepted; booleans, strings (numeric
    or not) and fractional numbers are not.

    Raises:
        ValidationError: If a present value is not an integer or is negative
        FieldNameError: If sort_by contains the reserved prefix
    """
    if pagination is None:
        return

    for name in PAGINATION_FIELDS:
        value = getattr(pagination, name)
        if value is None:
            continue
        if not is_integer(value):
            raise ValidationError(f"Pagination parameter '{name}' must be an integer, got {value!r}")
        if value < 0:
            raise ValidationError(f"Pagination parameter '{name}' must not be negative, got {value!r}")

    if pagination.sort_by is not None:
        validate_field_name(pagination.sort_by)


def is_integer(value: Any) -> bool:
    """Check if a value is an int or an integral float (bools excluded)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value.is_integer()
    return False
