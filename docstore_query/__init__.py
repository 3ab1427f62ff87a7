"""
docstore-query
Filter-expression compiler and paginated fetch for document stores.
"""

from .service import PaginationService, fetch_with_filters_and_pagination, map_native_key
from .models import (
    Operator,
    FilterClause,
    PaginationQuery,
    GenericFilterQuery,
    CompiledExpression,
    PaginatedResponse,
)
from .exceptions import (
    DocstoreQueryError,
    ValidationError,
    FieldNameError,
    UnsupportedOperatorError,
    BackendError,
)
from .filters import ExpressionBuilder, MongoExpressionBuilder
from .db import QueryExecutor, MongoQueryExecutor, SQLiteCollection
from .config import Config

__version__ = "1.0.0"

__all__ = [
    "PaginationService",
    "fetch_with_filters_and_pagination",
    "map_native_key",
    "Operator",
    "FilterClause",
    "PaginationQuery",
    "GenericFilterQuery",
    "CompiledExpression",
    "PaginatedResponse",
    "DocstoreQueryError",
    "ValidationError",
    "FieldNameError",
    "UnsupportedOperatorError",
    "BackendError",
    "ExpressionBuilder",
    "MongoExpressionBuilder",
    "QueryExecutor",
    "MongoQueryExecutor",
    "SQLiteCollection",
    "Config",
]
