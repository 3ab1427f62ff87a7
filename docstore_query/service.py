#!/usr/bin/env python3
"""
Paginated fetch orchestration.

PaginationService validates the request, compiles filters, runs a count
and a fetch through the injected executor, and reshapes records into a
PaginatedResponse.
"""

import logging
import math
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .config import DEFAULT_LIMIT, DEFAULT_PK_NAME
from .db.executor import MongoQueryExecutor, QueryExecutor
from .filters.base import ExpressionBuilder
from .filters.mongo_backend import MongoExpressionBuilder
from .filters.validator import validate_pagination
from .log_manager import get_logger, get_logging_manager
from .models import CompiledExpression, GenericFilterQuery, PaginatedResponse

QueryInput = Union[GenericFilterQuery, Mapping[str, Any], None]
ResultMapper = Callable[[Mapping[str, Any]], Any]


def map_native_key(record: Mapping[str, Any], native_key: str = "_id",
                   public_key: str = "id") -> Any:
    """
    Replace the native key with its string form under the public key.

    The public key comes first; every other field passes through unchanged,
    whatever its type. Records without a native key (or that are not
    mappings) are returned as they are.
    """
    if not isinstance(record, Mapping) or native_key not in record:
        return record
    rest = {k: v for k, v in record.items() if k != native_key}
    rest.pop(public_key, None)
    return {public_key: str(record[native_key]), **rest}


class PaginationService:
    """
    Orchestrates validation, compilation, count, fetch and reshaping.

    The builder, executor and result mapper are injected; any of them can
    be swapped without subclassing.
    """

    def __init__(self,
                 table_name: Optional[str] = None,
                 pk_name: str = DEFAULT_PK_NAME,
                 expression_builder: Optional[ExpressionBuilder] = None,
                 query_executor: Optional[QueryExecutor] = None,
                 result_mapper: Optional[ResultMapper] = None,
                 default_limit: int = DEFAULT_LIMIT):
        """
        Initialize the service.

        Args:
            table_name: Collection name, used in log messages
            pk_name: Public identifier field name
            expression_builder: Compiles filters (default: MongoExpressionBuilder)
            query_executor: Runs count and fetch (default: MongoQueryExecutor)
            result_mapper: Reshapes each raw record (default: map_native_key)
            default_limit: Page size when the request gives none (or 0)

        Raises:
            ValueError: If default_limit is not a positive integer
        """
        if isinstance(default_limit, bool) or not isinstance(default_limit, int) or default_limit <= 0:
            raise ValueError(f"default_limit must be a positive integer, got {default_limit!r}")

        self.table_name = table_name
        self.pk_name = pk_name
        self.expression_builder = expression_builder or MongoExpressionBuilder(pk_name=pk_name)
        self.query_executor = query_executor or MongoQueryExecutor()
        self.result_mapper = result_mapper or self._default_mapper
        self.default_limit = default_limit
        self.logger = get_logger('PaginationService', component='service')

    def _default_mapper(self, record: Mapping[str, Any]) -> Any:
        return map_native_key(record, self.expression_builder.native_key, self.pk_name)

    async def fetch_with_filters_and_pagination(self, query: QueryInput,
                                                collection: Any) -> PaginatedResponse:
        """
        Fetch one page of filtered records.

        Args:
            query: GenericFilterQuery or {"filters": [...], "pagination": {...}}
            collection: Collection handle with find() and count_documents()

        Returns:
            PaginatedResponse whose total excludes the raw offset and whose
            page is clamped to the real page count

        Raises:
            ValidationError, FieldNameError, UnsupportedOperatorError: before
                any backend call
            Any driver error from the count or fetch, unchanged
        """
        try:
            params = self.prepare_query_parameters(query)
            expression = params["expression"]
            limit = params["limit"]
            page = params["page"]
            base_offset = params["base_offset"]

            total_before_offset = await self.query_executor.count(expression, collection)

            effective_total = max(0, total_before_offset - base_offset)
            total_pages = math.ceil(effective_total / limit)

            items = await self.query_executor.execute_query(expression, collection)
            data = [self.result_mapper(item) for item in items]

            get_logging_manager().log_with_context(
                self.logger, logging.DEBUG, f"Fetched {len(data)} of {effective_total} records",
                {"table": self.table_name, "page": page, "limit": limit, "skip": expression.skip}
            )

            return PaginatedResponse(
                data=data,
                total=effective_total,
                page=min(page, total_pages),
                limit=limit,
            )
        except Exception as e:
            self.handle_error(e)
            raise

    def prepare_query_parameters(self, query: QueryInput) -> Dict[str, Any]:
        """
        Validate pagination and compile the full expression.

        A limit or page of 0 falls back to the default just like a missing
        one; only the offset keeps an explicit 0.

        Returns:
            Dict with expression, limit, page and base_offset
        """
        request = GenericFilterQuery.from_dict(query)
        pagination = request.pagination
        validate_pagination(pagination)

        limit = int(pagination.limit or 0) or self.default_limit
        page = int(pagination.page or 0) or 1
        base_offset = int(pagination.offset) if pagination.offset is not None else 0

        page_offset = (page - 1) * limit
        total_offset = base_offset + page_offset

        compiled = self.expression_builder.build_filter_expression(request.filters)
        self.expression_builder.apply_sort(compiled, pagination.sort_by, pagination.sort_direction)

        expression = CompiledExpression(
            conditions=compiled.conditions,
            sort=compiled.sort,
            limit=limit,
            skip=total_offset,
        )

        return {
            "expression": expression,
            "limit": limit,
            "page": page,
            "base_offset": base_offset,
        }

    def handle_error(self, error: Exception) -> None:
        """Log a failed fetch once; the caller re-raises it."""
        self.logger.error(
            f"Error fetching from {self.table_name or 'collection'}: "
            f"{type(error).__name__}: {error}"
        )


async def fetch_with_filters_and_pagination(table_name: str,
                                            query: QueryInput,
                                            collection: Any,
                                            pk_name: str = DEFAULT_PK_NAME,
                                            service: Optional[PaginationService] = None) -> PaginatedResponse:
    """
    Fetch one page from a MongoDB-shaped collection.

    Uses the given service, or a default PaginationService for table_name.
    """
    if service is None:
        service = PaginationService(table_name, pk_name)
    return await service.fetch_with_filters_and_pagination(query, collection)
