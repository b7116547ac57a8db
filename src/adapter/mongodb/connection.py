import logging
from pymongo import MongoClient
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

# Driver-level logs are noisy at INFO
logging.getLogger('pymongo').setLevel(logging.WARNING)

USERS_COLLECTION_NAME = 'users'

_client_cache: MongoClient | None = None
_client_uri: str | None = None


def _close_quietly(client: MongoClient) -> None:
    try:
        client.close()
    except PyMongoError as e:
        logger.debug("[MONGODB] Error while closing client", extra={"error": str(e)[:200]})


def reset_client():
    """Close and forget the cached client."""
    global _client_cache, _client_uri
    if _client_cache is not None:
        _close_quietly(_client_cache)
    _client_cache = None
    _client_uri = None


def get_mongodb_client(uri: str | None) -> MongoClient | None:
    """Return a healthy MongoDB client for `uri`.

    The client is cached per process and pinged on every call. A client
    that fails its ping, or was built for another URI, is closed and
    replaced. Failed attempts are not remembered, so the next call
    connects again once the server is back.

    Returns:
        MongoDB client or None if the server cannot be reached
    """
    global _client_cache, _client_uri

    if not uri:
        logger.error("[MONGODB] MONGODB_URI not configured.")
        return None

    if _client_cache is not None:
        if _client_uri == uri:
            try:
                _client_cache.admin.command('ping')
                return _client_cache
            except PyMongoError:
                logger.warning("[MONGODB] Cached client failed ping, reconnecting")
        reset_client()

    client = None
    try:
        client = MongoClient(
            uri,
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=5000,
            socketTimeoutMS=30000,
            maxPoolSize=10,
        )
        client.admin.command('ping')
    except PyMongoError as e:
        logger.error(f"[MONGODB] Connection failed: {str(e)[:200]}")
        if client is not None:
            _close_quietly(client)
        return None

    _client_cache = client
    _client_uri = uri
    logger.info("[MONGODB] Connected")
    return client
