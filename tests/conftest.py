"""
Shared pytest fixtures for docstore-query tests.
Provides collection doubles and a temporary SQLite document store.
"""

import logging
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from docstore_query.db import SQLiteCollection

# Keep test output quiet
logging.basicConfig(level=logging.CRITICAL)


def make_mock_collection(records: List[Dict[str, Any]], total: int) -> MagicMock:
    """
    Build a MongoDB-shaped collection double.

    find() returns a cursor whose sort/skip/limit chain back to itself;
    to_list() and count_documents() are AsyncMocks.
    """
    cursor = MagicMock(name="cursor")
    cursor.sort.return_value = cursor
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=records)

    collection = MagicMock(name="collection")
    collection.find.return_value = cursor
    collection.count_documents = AsyncMock(return_value=total)
    collection.cursor = cursor
    return collection


@pytest.fixture
def collection_factory():
    """Factory for MongoDB-shaped collection doubles."""
    return make_mock_collection


@pytest.fixture
def sample_record():
    """A raw record as the driver returns it."""
    return {
        "_id": ObjectId("64b7f0c2a1b2c3d4e5f60718"),
        "name": "Test",
        "active": True,
        "tags": ["tag1", "tag2"],
        "counts": [1, 2, 3],
        "metadata": {"key": "value"},
        "list": ["item1", 123],
    }


@pytest.fixture
def mock_collection(sample_record):
    """Collection double holding 42 matching records, returning one."""
    return make_mock_collection([sample_record], total=42)


@pytest_asyncio.fixture
async def sqlite_collection():
    """Provide an empty SQLiteCollection in a temporary database."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        collection = SQLiteCollection(str(db_path), "people")
        await collection.initialize()
        yield collection


@pytest_asyncio.fixture
async def people(sqlite_collection):
    """SQLiteCollection holding 42 people with deterministic names and ages."""
    documents = [
        {
            "name": f"person-{i:02d}",
            "email": f"person{i}@example.com",
            "age": 20 + (i % 30),
            "team": "red" if i % 2 == 0 else "blue",
            "tags": ["even"] if i % 2 == 0 else ["odd"],
        }
        for i in reversed(range(42))
    ]
    await sqlite_collection.insert_many(documents)
    return sqlite_collection
