#!/usr/bin/env python3
"""
Query execution against document-store collections.

Works with any collection exposing find(conditions) -> cursor
(sort/skip/limit/to_list) and count_documents(conditions): pymongo's
async and sync APIs, motor, or SQLiteCollection.
"""

import inspect
from abc import ABC, abstractmethod
from typing import Any, List

from ..models import CompiledExpression


async def resolve(result: Any) -> Any:
    """Await driver results that are awaitable; pass plain values through."""
    if inspect.isawaitable(result):
        return await result
    return result


class QueryExecutor(ABC):
    """Runs a CompiledExpression against a collection handle."""

    @abstractmethod
    async def execute_query(self, expression: CompiledExpression, collection: Any) -> List[Any]:
        """Return the raw records matching the expression."""
        pass

    @abstractmethod
    async def count(self, expression: CompiledExpression, collection: Any) -> int:
        """Count the records matching the expression's conditions only."""
        pass


class MongoQueryExecutor(QueryExecutor):
    """
    Executes compiled expressions through a MongoDB-shaped cursor.

    Driver errors propagate unchanged; nothing is retried.
    """

    async def execute_query(self, expression: CompiledExpression, collection: Any) -> List[Any]:
        cursor = collection.find(expression.conditions or {})

        if expression.sort:
            cursor = cursor.sort(list(expression.sort.items()))

        if isinstance(expression.skip, int):
            cursor = cursor.skip(expression.skip)

        if isinstance(expression.limit, int) and expression.limit > 0:
            cursor = cursor.limit(expression.limit)

        return await resolve(cursor.to_list(length=None))

    async def count(self, expression: CompiledExpression, collection: Any) -> int:
        return await resolve(collection.count_documents(expression.conditions or {}))
