"""In-memory implementation of UserRepository for testing."""

import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from domain.model.errors import ConflictError, NotFoundError
from domain.model.user import UPDATABLE_FIELDS, User


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}
        # Stands in for the unique email index of the real store
        self._lock = threading.Lock()

    # ── write operations ─────────────────────────────────────

    def create(self, email: str, password_hash: str, name: str | None) -> User:
        with self._lock:
            if self._find_email(email):
                raise ConflictError("Email already in use")

            now = datetime.now(timezone.utc)
            user = User(
                id=uuid.uuid4().hex,
                email=email,
                password_hash=password_hash,
                name=name,
                created_at=now,
                updated_at=now,
            )
            self.store[user.id] = user
            return replace(user)

    def update(self, user_id: str, fields: dict[str, Any]) -> User:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")

        with self._lock:
            user = self.store.get(user_id)
            if not user:
                raise NotFoundError("User not found")

            email = fields.get('email')
            if email is not None:
                owner = self._find_email(email)
                if owner and owner.id != user_id:
                    raise ConflictError("Email already in use")

            updated = replace(user, **fields, updated_at=datetime.now(timezone.utc))
            self.store[user_id] = updated
            return replace(updated)

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        user = self._find_email(email)
        return replace(user) if user else None

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return replace(user) if user else None

    def _find_email(self, email: str) -> User | None:
        for user in list(self.store.values()):
            if user.email == email:
                return user
        return None
