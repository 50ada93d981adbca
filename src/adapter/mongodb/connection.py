import os
import logging
from pymongo import MongoClient
from pymongo.errors import ConnectionFailure, PyMongoError

logger = logging.getLogger(__name__)

# Driver-level logs are noisy at INFO
logging.getLogger('pymongo').setLevel(logging.WARNING)

MONGO_URL = os.getenv('MONGO_URL', 'mongodb://localhost:27017')
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'salon')
USERS_COLLECTION_NAME = 'users'
APPOINTMENTS_COLLECTION_NAME = 'appointments'
SERVICES_COLLECTION_NAME = 'services'

_client_cache = None
_connection_attempted = False


def reset_client():
    global _client_cache, _connection_attempted
    _client_cache = None
    _connection_attempted = False


def get_mongodb_client() -> MongoClient | None:
    """Get MongoDB client with connection caching and reconnection logic.

    Connection strategy:
    1. Return cached client if healthy (ping succeeds)
    2. Otherwise attempt a fresh connection, once per call

    The server keeps running without a database: callers get None and the
    dashboard serves its fallback payloads.

    Returns:
        MongoDB client or None if connection fails
    """
    global _client_cache, _connection_attempted

    if _client_cache:
        try:
            _client_cache.admin.command('ping')
            return _client_cache
        except PyMongoError:
            _client_cache = None
            logger.debug("[MONGODB] Cached client failed ping, attempting reconnection...")

    if not MONGO_URL:
        logger.error("[MONGODB] MONGO_URL not configured")
        return None

    try:
        client = MongoClient(
            MONGO_URL,
            serverSelectionTimeoutMS=3000,  # keep degraded-mode responses fast
            connectTimeoutMS=3000,
            socketTimeoutMS=15000,
            maxPoolSize=10,
            minPoolSize=0,
            maxIdleTimeMS=30000,
            retryWrites=True,
            retryReads=True,
            tz_aware=True,
        )
        client.admin.command('ping')

        is_first_connection = not _connection_attempted
        _connection_attempted = True
        _client_cache = client

        if is_first_connection:
            logger.info(f"[MONGODB] Connected successfully to {DATABASE_NAME}")
        return client
    except (ConnectionFailure, PyMongoError) as e:
        if not _connection_attempted:
            logger.error(
                "[MONGODB] Connection failed, running in demo mode",
                extra={"error": str(e)[:200]},
            )
            _connection_attempted = True
        return None
