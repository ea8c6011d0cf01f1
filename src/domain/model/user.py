from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """Domain model representing a registered account."""
    id: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime
    name: str | None = None


# Fields a caller may patch through UserRepository.update()
UPDATABLE_FIELDS = frozenset({'email', 'password_hash', 'name'})
