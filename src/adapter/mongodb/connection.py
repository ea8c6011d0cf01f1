import logging
from pymongo import MongoClient
from pymongo.errors import ConnectionFailure, PyMongoError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

logger = logging.getLogger(__name__)

# Suppress verbose PyMongo driver logs
pymongo_logger = logging.getLogger('pymongo')
pymongo_logger.setLevel(logging.WARNING)

USERS_COLLECTION_NAME = 'users'

CONNECT_ATTEMPTS = 5
CONNECT_RETRY_DELAY_SECONDS = 3


@retry(
    retry=retry_if_exception_type((ConnectionFailure, PyMongoError)),
    stop=stop_after_attempt(CONNECT_ATTEMPTS),
    wait=wait_fixed(CONNECT_RETRY_DELAY_SECONDS),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
def _connect_with_retry(mongo_url: str, timeout_ms: int) -> MongoClient:
    """Open a client and ping it, retrying on transient failures."""
    client = MongoClient(
        mongo_url,
        serverSelectionTimeoutMS=timeout_ms,
        connectTimeoutMS=timeout_ms,
        socketTimeoutMS=timeout_ms,
        maxPoolSize=10,
        minPoolSize=0,
        maxIdleTimeMS=30000,
        waitQueueTimeoutMS=timeout_ms,
        retryWrites=True,
        retryReads=True,
    )
    try:
        client.admin.command('ping')
    except PyMongoError:
        client.close()
        raise
    return client


def connect_mongodb(mongo_url: str | None, timeout_seconds: float = 5.0) -> MongoClient | None:
    """Connect to MongoDB at startup.

    Returns None when MONGO_URL is not configured or every attempt failed;
    the API then keeps serving and store-backed requests fail with 500.
    """
    if not mongo_url:
        logger.error("[MONGODB] MONGO_URL not configured, starting without a credential store")
        return None

    try:
        client = _connect_with_retry(mongo_url, int(timeout_seconds * 1000))
    except (ConnectionFailure, PyMongoError) as e:
        logger.error(
            "[MONGODB] Could not connect after multiple attempts",
            extra={"attempts": CONNECT_ATTEMPTS, "error": str(e)[:200]},
        )
        return None

    logger.info("[MONGODB] Connected successfully")
    return client
