"""
Database module for docstore-query
Handles query execution and the SQLite document store
"""

from .executor import QueryExecutor, MongoQueryExecutor
from .sqlite_collection import SQLiteCollection, SQLiteCursor

__all__ = ['QueryExecutor', 'MongoQueryExecutor', 'SQLiteCollection', 'SQLiteCursor']
