from dataclasses import dataclass

from domain.model.user import User


@dataclass(frozen=True)
class SessionClaims:
    """Verified contents of a session token. Never persisted."""
    user_id: str


@dataclass
class AuthResult:
    """Outcome of a flow that mints a fresh session token."""
    user: User
    token: str
