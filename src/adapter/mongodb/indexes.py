"""MongoDB index management for the credential store.

The unique email index is what makes registration race-free, so startup
recreates it when an older index with the same keys or name is in the way.
"""

from logging import getLogger

from pymongo.errors import PyMongoError

logger = getLogger(__name__)


def create_index_safe(collection, keys: list, name: str, **kwargs) -> bool:
    """Create an index, replacing a conflicting one (same name or same keys)."""
    try:
        collection.create_index(keys, name=name, **kwargs)
        return True
    except PyMongoError as e:
        if "already exists" not in str(e) and "Conflict" not in str(e):
            raise

    wanted = dict(keys)
    for existing_name, info in collection.index_information().items():
        if existing_name == '_id_':
            continue
        same_keys = dict(info.get('key', [])) == wanted
        if existing_name == name or same_keys:
            logger.warning("Dropping conflicting index", extra={"index": existing_name})
            collection.drop_index(existing_name)
            collection.create_index(keys, name=name, **kwargs)
            return True

    logger.error("Failed to resolve index conflict", extra={"index": name})
    return False


def ensure_all_indexes(db) -> bool:
    """Ensure indexes for all collections. Called at app startup."""
    from adapter.mongodb.user_repository import MongoUserRepository

    return MongoUserRepository(db).ensure_indexes()
