"""
Configuration helpers for docstore-query.
Supports environment variables for easy deployment configuration.
"""

import os
from typing import Any, Dict

DEFAULT_LIMIT = 10
DEFAULT_PK_NAME = "id"


class Config:
    """
    Configuration helper that reads from environment variables.

    Environment variables:
        DOCSTORE_QUERY_DEFAULT_LIMIT: Page size when a request gives none (default: 10)
        DOCSTORE_QUERY_PK_NAME: Public identifier field name (default: id)
        DOCSTORE_QUERY_DB_PATH: SQLite database path for SQLiteCollection
        DOCSTORE_QUERY_LOG_DIR: Directory for log files (read by log_manager)
        DOCSTORE_QUERY_DEBUG: Enable debug logging (read by log_manager)
    """

    @staticmethod
    def from_env() -> Dict[str, Any]:
        """
        Create service configuration from environment variables.

        Returns:
            Dict with keyword arguments for PaginationService

        Example:
            from docstore_query import PaginationService
            from docstore_query.config import Config

            service = PaginationService(**Config.from_env())
        """
        raw_limit = os.getenv("DOCSTORE_QUERY_DEFAULT_LIMIT")
        try:
            default_limit = int(raw_limit) if raw_limit else DEFAULT_LIMIT
        except ValueError:
            raise ValueError(
                f"DOCSTORE_QUERY_DEFAULT_LIMIT must be an integer, got {raw_limit!r}"
            ) from None
        if default_limit <= 0:
            raise ValueError("DOCSTORE_QUERY_DEFAULT_LIMIT must be positive")

        return {
            "default_limit": default_limit,
            "pk_name": os.getenv("DOCSTORE_QUERY_PK_NAME", DEFAULT_PK_NAME),
        }

    @staticmethod
    def for_sqlite(db_path: str = None) -> Dict[str, Any]:
        """
        Configuration for a local SQLite document store.

        Args:
            db_path: Database file (default: DOCSTORE_QUERY_DB_PATH or ./docstore.db)

        Returns:
            Dict with keyword arguments for SQLiteCollection (minus the table name)
        """
        return {
            "db_path": db_path or os.getenv("DOCSTORE_QUERY_DB_PATH", "docstore.db"),
        }
