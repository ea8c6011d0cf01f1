from typing import Any, Protocol

from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for credential storage.

    Implementations must enforce email uniqueness atomically: two concurrent
    create() calls with the same email never both succeed.
    Driver failures surface as StoreUnavailableError.
    """
    def create(self, email: str, password_hash: str, name: str | None) -> User:
        """Create a new user. Raise ConflictError if the email is taken."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def update(self, user_id: str, fields: dict[str, Any]) -> User:
        """Apply a sparse patch and return the updated User.

        Raise NotFoundError if the user is absent, ConflictError if the new
        email belongs to another user.
        """
        ...
