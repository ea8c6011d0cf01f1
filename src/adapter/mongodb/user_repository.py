"""MongoDB implementation of UserRepository."""

import uuid
from datetime import datetime, timezone
from logging import getLogger
from typing import Any

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb.connection import USERS_COLLECTION_NAME
from domain.model.errors import ConflictError, NotFoundError, StoreUnavailableError
from domain.model.user import UPDATABLE_FIELDS, User

logger = getLogger(__name__)


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('email', 1)], 'idx_users_email', unique=True)
            create_index_safe(self.collection, [('created_at', -1)], 'idx_users_created_at')
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            email=doc['email'],
            password_hash=doc['password_hash'],
            name=doc.get('name'),
            created_at=doc['created_at'],
            updated_at=doc.get('updated_at', doc['created_at']),
        )

    def create(self, email: str, password_hash: str, name: str | None) -> User:
        """Insert a user; the unique email index rejects concurrent duplicates."""
        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': user_id,
            'email': email,
            'password_hash': password_hash,
            'name': name,
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError:
            logger.warning("User creation failed: email already exists")
            raise ConflictError("Email already in use")
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"error": str(e)})
            raise StoreUnavailableError("Failed to create user") from e

        logger.info("User created", extra={"userId": user_id})
        return self._to_domain(user_doc)

    def update(self, user_id: str, fields: dict[str, Any]) -> User:
        """Apply a sparse $set and return the document after the update."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")

        changes = dict(fields, updated_at=datetime.now(timezone.utc))
        try:
            doc = self.collection.find_one_and_update(
                {'_id': user_id},
                {'$set': changes},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            logger.warning("User update failed: email already exists", extra={"userId": user_id})
            raise ConflictError("Email already in use")
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"userId": user_id, "error": str(e)})
            raise StoreUnavailableError("Failed to update user") from e

        if doc is None:
            raise NotFoundError("User not found")

        logger.debug("User updated", extra={"userId": user_id, "fields": sorted(fields)})
        return self._to_domain(doc)

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'email': email})
        except PyMongoError as e:
            logger.error("Failed to get user by email", extra={"error": str(e)})
            raise StoreUnavailableError("Failed to look up user") from e
        return self._to_domain(doc) if doc else None

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise StoreUnavailableError("Failed to look up user") from e
        return self._to_domain(doc) if doc else None
