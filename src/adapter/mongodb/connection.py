import os
import logging
import threading

from pymongo import MongoClient
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

logging.getLogger('pymongo').setLevel(logging.WARNING)

DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'signin')
USERS_COLLECTION_NAME = 'users'

SERVER_SELECTION_TIMEOUT_MS = int(os.getenv('MONGO_SERVER_SELECTION_TIMEOUT_MS', '5000'))

_client = None
_lock = threading.Lock()


def reset_client():
    global _client
    with _lock:
        if _client is not None:
            _client.close()
        _client = None


def _connect(url: str) -> MongoClient:
    # Timestamps come back as aware UTC datetimes, matching what the repository writes
    return MongoClient(
        url,
        tz_aware=True,
        serverSelectionTimeoutMS=SERVER_SELECTION_TIMEOUT_MS,
        connectTimeoutMS=SERVER_SELECTION_TIMEOUT_MS,
        retryWrites=True,
    )


def get_mongodb_client() -> MongoClient | None:
    """Return a shared client for MONGO_URL, or None when the server is unreachable.

    The client is created lazily and pinged on every call, so a server that
    comes back after an outage is picked up without a restart.
    """
    global _client

    url = os.getenv('MONGO_URL')
    if not url:
        logger.error("MONGO_URL not configured")
        return None

    with _lock:
        if _client is None:
            _client = _connect(url)
        client = _client

    try:
        client.admin.command('ping')
    except PyMongoError as e:
        logger.warning("MongoDB ping failed", extra={"error": str(e)[:200]})
        return None
    return client
