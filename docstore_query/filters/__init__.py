"""
Filter compilation for document stores.

Turns (field, operator, value) clauses into backend-native query objects.

Example usage:
    from docstore_query.filters import MongoExpressionBuilder

    builder = MongoExpressionBuilder()
    expression = builder.build_filter_expression([
        {"field": "status", "operator": "in", "value": ["active", "pending"]},
        {"field": "name", "operator": "like", "value": "smith"},
    ])
    # expression.conditions == {
    #     "status": {"$in": ["active", "pending"]},
    #     "name": {"$regex": re.compile("smith", re.IGNORECASE)},
    # }
"""

from .base import ExpressionBuilder
from .mongo_backend import MongoExpressionBuilder
from .validator import (
    RESERVED_PREFIX,
    validate_value,
    validate_field_name,
    validate_pagination,
)

__all__ = [
    # Builders
    'ExpressionBuilder',
    'MongoExpressionBuilder',

    # Validation
    'RESERVED_PREFIX',
    'validate_value',
    'validate_field_name',
    'validate_pagination',
]
