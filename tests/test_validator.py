#!/usr/bin/env python3
"""
Tests for filter value and pagination validation.
"""

import pytest

from docstore_query.exceptions import FieldNameError, ValidationError
from docstore_query.filters.validator import (
    is_integer, validate_field_name, validate_pagination, validate_value
)
from docstore_query.models import PaginationQuery


class TestValidateValue:
    """Operator-injection scan over filter values."""

    @pytest.mark.parametrize("value", [
        "plain string",
        "$not-a-key-just-text",
        42,
        3.5,
        True,
        None,
        [1, "text", True],
        {"nested": {"deep": {"value": 123}}},
        [{"a": [{"b": 1}]}],
    ])
    def test_safe_values_pass(self, value):
        """Scalars, plain mappings and sequences are accepted."""
        validate_value(value)

    @pytest.mark.parametrize("value", [
        {"$where": "malicious"},
        {"$regex": ".*"},
        {"nested": {"$ne": None}},
        [{"ok": 1}, {"$gt": ""}],
        {"a": [{"b": ({"$exists": True},)}]},
    ])
    def test_injection_shapes_rejected(self, value):
        """Reserved-prefix keys fail at any depth."""
        with pytest.raises(ValidationError):
            validate_value(value)

    @pytest.mark.parametrize("value", [
        {"constructor": "x"},
        {"prototype": {"name": "draft"}},
        {"__proto__": 1},
    ])
    def test_object_model_names_are_plain_keys(self, value):
        """Only the reserved prefix marks a key as unsafe."""
        validate_value(value)

    def test_deep_nesting_accepted(self):
        value = current = []
        for _ in range(5000):
            child = []
            current.append(child)
            current = child

        validate_value(value)

    def test_deep_injected_key_rejected(self):
        value = current = {}
        for _ in range(5000):
            current["child"] = {}
            current = current["child"]
        current["$where"] = "1"

        with pytest.raises(ValidationError, match=r"\$where"):
            validate_value(value)

    def test_self_referencing_value(self):
        value = {"a": []}
        value["a"].append(value)

        validate_value(value)


class TestValidateFieldName:
    """Field-name guard."""

    def test_plain_and_dotted_names_pass(self):
        validate_field_name("email")
        validate_field_name("address.city")

    @pytest.mark.parametrize("field", ["$where", "a.$b", "price$", "", None, 7])
    def test_bad_names_rejected(self, field):
        with pytest.raises(FieldNameError):
            validate_field_name(field)


class TestValidatePagination:
    """Integer checks on page, limit and offset."""

    def test_empty_pagination_passes(self):
        validate_pagination(PaginationQuery())
        validate_pagination(None)

    def test_integers_pass(self):
        validate_pagination(PaginationQuery(page=2, limit=25, offset=0))

    def test_integral_float_passes(self):
        validate_pagination(PaginationQuery(page=2.0, limit=10.0))

    @pytest.mark.parametrize("name", ["page", "limit", "offset"])
    @pytest.mark.parametrize("value", [1.5, 3.14, "1", "invalid", True, [1], float("inf")])
    def test_non_integers_rejected(self, name, value):
        """Fractional numbers, strings and booleans all fail the same way."""
        with pytest.raises(ValidationError, match="must be an integer"):
            validate_pagination(PaginationQuery(**{name: value}))

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="must not be negative"):
            validate_pagination(PaginationQuery(offset=-5))

    def test_sort_field_guarded(self):
        with pytest.raises(FieldNameError):
            validate_pagination(PaginationQuery(sort_by="$natural"))

    def test_is_integer(self):
        assert is_integer(3)
        assert is_integer(3.0)
        assert not is_integer(3.2)
        assert not is_integer(False)
        assert not is_integer("3")
