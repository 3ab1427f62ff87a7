#!/usr/bin/env python3
"""
Database connection helpers for the SQLite document store
Provides connection management and error translation
"""

import functools
import re
from contextlib import asynccontextmanager
from typing import Any, Optional

import aiosqlite

from ..exceptions import BackendError


def regexp(pattern: Optional[str], value: Any) -> int:
    """SQLite REGEXP implementation; `value REGEXP pattern` calls regexp(pattern, value)."""
    if pattern is None or value is None:
        return 0
    return 1 if re.search(pattern, str(value)) else 0


@asynccontextmanager
async def aconnect(db_path: str, writer: bool = False):
    """
    Asynchronous database connection context manager.

    Args:
        db_path: Path to SQLite database
        writer: If True, commits changes on exit
    """
    conn = await aiosqlite.connect(db_path)
    try:
        # Enable WAL mode for better concurrency
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA busy_timeout=5000")
        await conn.create_function("REGEXP", 2, regexp, deterministic=True)

        yield conn

        if writer:
            await conn.commit()
    except Exception:
        if writer:
            await conn.rollback()
        raise
    finally:
        await conn.close()


def backend_errors(fn):
    """
    Decorator that re-raises driver failures as BackendError.

    The original message is kept verbatim and the driver exception is
    chained as the cause.
    """
    @functools.wraps(fn)
    async def wrapper(*args, **kwargs):
        try:
            return await fn(*args, **kwargs)
        except aiosqlite.Error as e:
            raise BackendError(str(e)) from e
    return wrapper
