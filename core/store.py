"""
MongoDB connection management for the StudySpot collections.

One client (and its connection pool) is created lazily and reused across
reruns of the app.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from core import config
from core.errors import RemoteOperationError

logger = logging.getLogger(__name__)

# Collection names (field names inside them are part of the storage contract)
SUBJECTS = "subjects"
TOPICS = "topics"
FLASHCARDS = "flashcards"
TEST_RESULTS = "testResults"
USERS = "users"

# Creation order: timestamp first, insertion order (ObjectId) breaks ties
CREATION_ORDER = [("timestamp", 1), ("_id", 1)]

_client: Optional[MongoClient] = None
_database: Optional[Database] = None


# ---- Connection Management ----

def get_database() -> Database:
    """
    Get the StudySpot database, connecting on first use.

    Returns:
        MongoDB database object
    """
    global _client, _database

    if _database is not None:
        return _database

    _client = MongoClient(
        config.get_mongo_uri(),
        maxPoolSize=10,  # Connection pool size
        minPoolSize=1,   # Keep at least 1 connection alive
        maxIdleTimeMS=60000  # Keep connections alive for 60 seconds
    )
    _database = _client[config.get_database_name()]
    logger.info("Connected to MongoDB database '%s'", _database.name)
    return _database


def get_collection(name: str) -> Collection:
    return get_database()[name]


def use_database(database: Optional[Database]) -> None:
    """
    Replace the active database (used by tests and maintenance scripts).
    """
    global _database
    _database = database


def reset_connection() -> None:
    """Close the cached client so the next call reconnects."""
    global _client, _database
    if _client is not None:
        _client.close()
    _client = None
    _database = None


def server_timestamp() -> datetime:
    """Timestamp used for creation-order fields."""
    return datetime.now(timezone.utc)


@contextmanager
def remote_operation(operation: str) -> Iterator[None]:
    """
    Translate driver failures inside the block into RemoteOperationError.

    Args:
        operation: Short description used in logs and the user message
            (e.g. "load topics")
    """
    try:
        yield
    except PyMongoError as exc:
        logger.error("Remote operation failed: %s", operation, exc_info=True)
        raise RemoteOperationError(operation, str(exc)) from exc
