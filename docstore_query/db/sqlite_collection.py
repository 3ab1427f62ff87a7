#!/usr/bin/env python3
"""
SQLite-backed document collection.

Stores JSON documents keyed by _id and answers MongoDB-style conditions
(as produced by MongoExpressionBuilder) through json_extract. Exposes the
find()/count_documents() shape that MongoQueryExecutor expects.
"""

import json
import re
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from bson import ObjectId

from ..exceptions import UnsupportedOperatorError
from ..log_manager import get_logger
from .db_helpers import aconnect, backend_errors

Fragment = Tuple[str, List[Any]]

_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _json_default(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _decode_key(raw: str) -> Union[ObjectId, str]:
    return ObjectId(raw) if ObjectId.is_valid(raw) else raw


class SQLiteConditionTranslator:
    """
    Converts MongoDB-style conditions to SQLite WHERE clauses.

    Field paths are bound as parameters to json_extract, so field names
    never reach the SQL text.
    """

    SUPPORTED_OPERATORS = {
        "$eq", "$ne", "$lt", "$lte", "$gt", "$gte",
        "$in", "$nin", "$regex", "$not",
    }

    COMPARISONS = {"$lt": "<", "$lte": "<=", "$gt": ">", "$gte": ">="}

    def __init__(self, key_field: str = "_id", doc_column: str = "doc"):
        self.key_field = key_field
        self.doc_column = doc_column

    def translate(self, conditions: Optional[Mapping[str, Any]]) -> Fragment:
        """
        Translate a conditions mapping.

        Returns:
            Tuple of (where_clause, params)
        """
        if not conditions:
            return "1=1", []

        parts = []
        params: List[Any] = []
        for field, predicate in conditions.items():
            sql, field_params = self._translate_field(field, predicate)
            parts.append(sql)
            params.extend(field_params)
        return " AND ".join(parts), params

    def field_reference(self, field: str) -> Fragment:
        """Column reference for the key, json_extract for everything else."""
        if field == self.key_field:
            return self.key_field, []
        return f"json_extract({self.doc_column}, ?)", [f"$.{field}"]

    def _translate_field(self, field: str, predicate: Any) -> Fragment:
        if isinstance(predicate, Mapping) and predicate and all(
                str(k).startswith("$") for k in predicate):
            parts = []
            params: List[Any] = []
            for op, value in predicate.items():
                sql, op_params = self._build_operator(field, op, value)
                parts.append(sql)
                params.extend(op_params)
            return f"({' AND '.join(parts)})", params

        return self._build_equality(field, predicate, negated=False)

    def _build_operator(self, field: str, op: str, value: Any) -> Fragment:
        if op == "$eq":
            return self._build_equality(field, value, negated=False)
        elif op == "$ne":
            return self._build_equality(field, value, negated=True)
        elif op in self.COMPARISONS:
            ref, ref_params = self.field_reference(field)
            return f"{ref} {self.COMPARISONS[op]} ?", ref_params + [self._to_sql(value)]
        elif op == "$in":
            return self._build_in(field, value, negated=False)
        elif op == "$nin":
            return self._build_in(field, value, negated=True)
        elif op == "$regex":
            return self._build_regex(field, value, negated=False)
        elif op == "$not":
            return self._build_regex(field, value, negated=True)
        else:
            raise UnsupportedOperatorError(op, "SQLite")

    def _build_equality(self, field: str, value: Any, negated: bool) -> Fragment:
        """Build equality comparison."""
        ref, ref_params = self.field_reference(field)

        if value is None:
            op = "IS NOT" if negated else "IS"
            return f"{ref} {op} NULL", ref_params

        if isinstance(value, (list, dict)):
            # Complex types - compare as JSON
            sql = f"json({ref}) = json(?)"
            params = ref_params + [json.dumps(value, default=_json_default)]
        else:
            sql = f"{ref} = ?"
            params = ref_params + [self._to_sql(value)]

        if negated:
            # Missing fields satisfy $ne, as in MongoDB
            ref_again, ref_again_params = self.field_reference(field)
            return f"({ref_again} IS NULL OR NOT ({sql}))", ref_again_params + params
        return sql, params

    def _build_in(self, field: str, values: Iterable[Any], negated: bool) -> Fragment:
        """Build IN/NOT IN clause."""
        values = list(values)
        if not values:
            return ("1=1" if negated else "0=1"), []

        ref, ref_params = self.field_reference(field)
        placeholders = ','.join(['?' for _ in values])
        params = ref_params + [self._to_sql(v) for v in values]

        if negated:
            ref_again, ref_again_params = self.field_reference(field)
            return (f"({ref_again} IS NULL OR {ref} NOT IN ({placeholders}))",
                    ref_again_params + params)
        return f"{ref} IN ({placeholders})", params

    def _build_regex(self, field: str, pattern: Any, negated: bool) -> Fragment:
        """Build regex match through the REGEXP function."""
        if isinstance(pattern, re.Pattern):
            source = pattern.pattern
            if pattern.flags & re.IGNORECASE:
                source = f"(?i){source}"
        elif isinstance(pattern, str):
            source = pattern
        else:
            raise UnsupportedOperatorError("$not" if negated else "$regex", "SQLite")

        ref, ref_params = self.field_reference(field)
        result = f"{ref} REGEXP ?"
        params = ref_params + [source]
        return (f"NOT ({result})" if negated else result), params

    @staticmethod
    def _to_sql(value: Any) -> Any:
        if isinstance(value, bool):
            # json_extract yields booleans as 0/1
            return 1 if value else 0
        if isinstance(value, ObjectId):
            return str(value)
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        return value


class SQLiteCursor:
    """Lazy query over a SQLiteCollection; executes on to_list()."""

    def __init__(self, collection: 'SQLiteCollection', conditions: Optional[Mapping[str, Any]]):
        self._collection = collection
        self._conditions = dict(conditions or {})
        self._sort: List[Tuple[str, int]] = []
        self._skip = 0
        self._limit = 0

    def sort(self, key_or_list: Union[str, List[Tuple[str, int]], Mapping[str, int]],
             direction: Optional[int] = None) -> 'SQLiteCursor':
        if isinstance(key_or_list, str):
            self._sort = [(key_or_list, direction if direction is not None else 1)]
        elif isinstance(key_or_list, Mapping):
            self._sort = list(key_or_list.items())
        else:
            self._sort = list(key_or_list)
        return self

    def skip(self, n: int) -> 'SQLiteCursor':
        self._skip = n
        return self

    def limit(self, n: int) -> 'SQLiteCursor':
        self._limit = n
        return self

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        limit = self._limit
        if length is not None and (limit <= 0 or length < limit):
            limit = length
        return await self._collection._fetch(self._conditions, self._sort, self._skip, limit)


class SQLiteCollection:
    """
    JSON document collection in a single SQLite table.

    Documents are stored as (_id TEXT PRIMARY KEY, doc TEXT); keys are
    ObjectIds unless the caller supplies its own.
    """

    def __init__(self, db_path: str, table: str):
        """
        Args:
            db_path: Path to SQLite database file
            table: Table holding the collection
        """
        if not _TABLE_NAME.match(table):
            raise ValueError(f"Invalid table name: {table!r}")
        self.db_path = db_path
        self.table = table
        self.translator = SQLiteConditionTranslator()
        self.logger = get_logger('SQLiteCollection', component='db')

    @backend_errors
    async def initialize(self):
        async with aconnect(self.db_path, writer=True) as conn:
            await conn.execute(
                f"CREATE TABLE IF NOT EXISTS {self.table} ("
                "_id TEXT PRIMARY KEY, doc TEXT NOT NULL)"
            )
        self.logger.debug(f"Initialized collection table {self.table}")

    @backend_errors
    async def insert_many(self, documents: Iterable[Mapping[str, Any]]) -> List[Any]:
        """
        Insert documents, assigning ObjectId keys where _id is missing.

        Returns:
            The inserted keys, in order
        """
        keys = []
        rows = []
        for document in documents:
            doc = dict(document)
            key = doc.pop("_id", None)
            if key is None:
                key = ObjectId()
            keys.append(key)
            rows.append((str(key), json.dumps(doc, default=_json_default)))

        async with aconnect(self.db_path, writer=True) as conn:
            await conn.executemany(
                f"INSERT INTO {self.table} (_id, doc) VALUES (?, ?)", rows
            )

        self.logger.info(f"Inserted {len(rows)} documents into {self.table}")
        return keys

    def find(self, conditions: Optional[Mapping[str, Any]] = None) -> SQLiteCursor:
        return SQLiteCursor(self, conditions)

    @backend_errors
    async def count_documents(self, conditions: Optional[Mapping[str, Any]] = None) -> int:
        where, params = self.translator.translate(conditions)
        async with aconnect(self.db_path) as conn:
            async with conn.execute(
                f"SELECT COUNT(*) FROM {self.table} WHERE {where}", params
            ) as cursor:
                row = await cursor.fetchone()
        return row[0]

    @backend_errors
    async def _fetch(self, conditions: Mapping[str, Any], sort: List[Tuple[str, int]],
                     skip: int, limit: int) -> List[Dict[str, Any]]:
        where, params = self.translator.translate(conditions)

        order_parts = []
        for field, direction in sort:
            ref, ref_params = self.translator.field_reference(field)
            order_parts.append(f"{ref} {'DESC' if direction == -1 else 'ASC'}")
            params.extend(ref_params)
        # Insertion order breaks ties so repeated queries page consistently
        order_parts.append("rowid ASC")

        sql = (f"SELECT _id, doc FROM {self.table} WHERE {where} "
               f"ORDER BY {', '.join(order_parts)} LIMIT ? OFFSET ?")
        params.extend([limit if limit and limit > 0 else -1, skip or 0])

        async with aconnect(self.db_path) as conn:
            async with conn.execute(sql, params) as cursor:
                rows = await cursor.fetchall()

        results = []
        for raw_key, raw_doc in rows:
            document = {"_id": _decode_key(raw_key)}
            document.update(json.loads(raw_doc))
            results.append(document)
        return results
