#!/usr/bin/env python3
"""
MongoDB backend for filter clauses.
Compiles FilterClause lists to MongoDB query documents.
"""

import re
from typing import Any, Dict, Tuple, Union

import pymongo
from bson import ObjectId

from ..exceptions import ValidationError
from ..models import Operator
from .base import ExpressionBuilder


class MongoExpressionBuilder(ExpressionBuilder):
    """
    Compiles filter clauses to MongoDB conditions.

    Produces {field: {"$op": value}} predicates; like/not_like compile to
    case-insensitive patterns built from the escaped value.
    """

    ASCENDING = pymongo.ASCENDING
    DESCENDING = pymongo.DESCENDING

    OPERATOR_MAP = {
        Operator.LT: "$lt",
        Operator.GT: "$gt",
        Operator.LTE: "$lte",
        Operator.GTE: "$gte",
        Operator.EQ: "$eq",
        Operator.NE: "$ne",
        Operator.IN: "$in",
        Operator.NOT_IN: "$nin",
        Operator.LIKE: "$regex",
        Operator.NOT_LIKE: "$not",
    }

    # Operators whose value must be a collection
    SET_OPERATORS = {Operator.IN, Operator.NOT_IN}

    # Operators whose value must be a string
    PATTERN_OPERATORS = {Operator.LIKE, Operator.NOT_LIKE}

    def supports_operator(self, operator: Union[Operator, str]) -> bool:
        """Check if the MongoDB builder supports an operator."""
        return Operator.is_valid(operator)

    def rewrite_identifier(self, field: str, operator: Union[Operator, str],
                           value: Any) -> Tuple[str, Any]:
        """
        Target _id with an ObjectId when an id filter holds a valid key string.

        Pattern operators keep the public field and the string value.
        """
        if Operator.from_string(operator) in self.PATTERN_OPERATORS:
            return field, value
        if field == self.pk_name and isinstance(value, str) and ObjectId.is_valid(value):
            return self.native_key, ObjectId(value)
        return field, value

    def build_sub_expression(self, field: str, operator: Union[Operator, str], value: Any) -> Dict[str, Any]:
        """Build the MongoDB predicate for one clause."""
        op = Operator.from_string(operator)
        mongo_op = self.OPERATOR_MAP[op]

        if op in self.SET_OPERATORS:
            if not isinstance(value, (list, tuple, set, frozenset)):
                raise ValidationError(
                    f"Operator '{op.value}' on field '{field}' requires a list, got {type(value).__name__}"
                )
            return {mongo_op: list(value)}

        if op in self.PATTERN_OPERATORS:
            if not isinstance(value, str):
                raise ValidationError(
                    f"Operator '{op.value}' on field '{field}' requires a string, got {type(value).__name__}"
                )
            return {mongo_op: self.build_regex_pattern(value)}

        return {mongo_op: value}

    @staticmethod
    def build_regex_pattern(value: str) -> re.Pattern:
        """Case-insensitive pattern matching the value literally as a substring."""
        return re.compile(re.escape(value), re.IGNORECASE)
