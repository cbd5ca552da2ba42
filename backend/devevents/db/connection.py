"""
Cached MongoDB connection.

CONNECTION STRATEGY: Single-flight with a cached handle
=======================================================

Problem:
  Every request needs a database handle. Building a client per request costs
  a TCP/TLS handshake plus server selection, and a burst of requests arriving
  before the first connection is ready would each start their own.

Solution:
  A process-wide ConnectionCache with two slots:

  1. `_database` - the resolved handle. When present, acquire() returns it
     without any I/O.
  2. `_attempt` - the in-flight connection task. Concurrent callers that find
     an attempt running await that same task instead of starting another.

  The attempt's done-callback is the only code that writes either slot:
  on success it stores the handle, on failure it clears `_attempt` so the
  next acquire() starts over. A failed attempt never populates `_database`.

  Waiters await the attempt through asyncio.shield(), so a cancelled request
  does not cancel the connection every other waiter depends on.

Driver options:
  maxPoolSize=10 / minPoolSize=2, serverSelectionTimeoutMS=5000,
  socketTimeoutMS=45000, retryWrites/retryReads on. The motor client connects
  lazily, so the attempt issues a `ping` to fail fast rather than queueing
  operations against a server that is not there.
"""

import asyncio
from typing import Any, Callable, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from devevents.core.config import get_settings
from devevents.core.errors import DatabaseConnectionError
from devevents.core.logging import get_logger
from devevents.core.metrics import connection_cache_hits, connection_ready, record_connection_attempt

logger = get_logger(__name__)

ClientFactory = Callable[..., Any]


class ConnectionCache:
    """Single-flight cache for one MongoDB database handle."""

    def __init__(
        self,
        uri: str,
        db_name: str,
        client_factory: ClientFactory = AsyncIOMotorClient,
        **client_options: Any,
    ) -> None:
        self._uri = uri
        self._db_name = db_name
        self._client_factory = client_factory
        self._client_options = client_options
        self._client: Any = None
        self._database: Optional[AsyncIOMotorDatabase] = None
        self._attempt: Optional[asyncio.Task] = None

    @property
    def is_connected(self) -> bool:
        return self._database is not None

    async def acquire(self) -> AsyncIOMotorDatabase:
        """Return the cached handle, joining or starting a connection attempt."""
        if self._database is not None:
            connection_cache_hits.inc()
            logger.debug("mongodb_connection_reused")
            return self._database

        if self._attempt is None:
            self._attempt = asyncio.ensure_future(self._connect())
            self._attempt.add_done_callback(self._settle)

        return await asyncio.shield(self._attempt)

    async def _connect(self) -> AsyncIOMotorDatabase:
        client = None
        try:
            # A malformed URI fails here rather than at the ping
            client = self._client_factory(self._uri, **self._client_options)
            await client.admin.command("ping")
        except PyMongoError as e:
            if client is not None:
                client.close()
            record_connection_attempt(success=False)
            logger.error("mongodb_connection_failed", error=str(e))
            raise DatabaseConnectionError(f"Database connection error: {e}") from e

        self._client = client
        record_connection_attempt(success=True)
        logger.info("mongodb_connected", database=self._db_name)
        return client.get_default_database(default=self._db_name)

    def _settle(self, attempt: asyncio.Task) -> None:
        if attempt is not self._attempt:
            return
        if attempt.cancelled() or attempt.exception() is not None:
            self._attempt = None
            return
        self._database = attempt.result()

    async def close(self) -> None:
        """Close the client and empty both slots."""
        attempt, self._attempt = self._attempt, None
        if attempt is not None and not attempt.done():
            attempt.cancel()
        if self._client is not None:
            self._client.close()
            logger.info("mongodb_connection_closed")
        self._client = None
        self._database = None
        connection_ready.set(0)


_cache: Optional[ConnectionCache] = None


def get_connection_cache() -> ConnectionCache:
    """Return the process-wide cache, building it from settings on first use."""
    global _cache

    if _cache is None:
        settings = get_settings()
        _cache = ConnectionCache(
            settings.MONGODB_URI,
            settings.MONGODB_DB_NAME,
            maxPoolSize=settings.MONGODB_MAX_POOL_SIZE,
            minPoolSize=settings.MONGODB_MIN_POOL_SIZE,
            serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
            socketTimeoutMS=settings.MONGODB_SOCKET_TIMEOUT_MS,
            retryWrites=True,
            retryReads=True,
        )
    return _cache


async def acquire_connection() -> AsyncIOMotorDatabase:
    """Get a ready database handle from the process-wide cache."""
    return await get_connection_cache().acquire()


async def close_connection() -> None:
    global _cache
    if _cache is not None:
        await _cache.close()
        _cache = None


async def get_database() -> AsyncIOMotorDatabase:
    """FastAPI dependency yielding the cached database handle."""
    return await acquire_connection()


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create the indexes the schema relies on. Safe to call repeatedly."""
    await db.events.create_index([("slug", ASCENDING)], unique=True, name="uq_events_slug")
    await db.bookings.create_index([("eventId", ASCENDING)], name="ix_bookings_event_id")
    logger.info("mongodb_indexes_ensured")
