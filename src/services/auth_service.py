"""Auth service: registration, login, profile and session business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that the API layer maps to HTTP status codes.

Store and bcrypt calls run in worker threads so concurrent requests are
never blocked; store calls are bounded by a timeout.
"""

import asyncio
import logging
from typing import Any, Callable, TypeVar

from domain.model.errors import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    StoreUnavailableError,
)
from domain.model.session import AuthResult
from domain.model.user import User
from port.user_repository import UserRepository
from services.password_hasher import PasswordHasher
from services.token_issuer import TokenIssuer

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_STORE_TIMEOUT_SECONDS = 5.0


class AuthService:
    def __init__(
        self,
        repo: UserRepository,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        store_timeout: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    ):
        self.repo = repo
        self.hasher = hasher
        self.issuer = issuer
        self.store_timeout = store_timeout

    async def _store(self, fn: Callable[..., T], *args) -> T:
        try:
            return await asyncio.wait_for(asyncio.to_thread(fn, *args), timeout=self.store_timeout)
        except asyncio.TimeoutError:
            logger.error("Credential store call timed out", extra={
                "operation": getattr(fn, "__name__", str(fn)),
                "timeout": self.store_timeout,
            })
            raise StoreUnavailableError("Credential store timed out")

    async def register(self, email: str, password: str, name: str | None = None) -> AuthResult:
        """Register a new user and open a session.

        Raises:
            ConflictError: email already registered
        """
        if await self._store(self.repo.get_by_email, email):
            raise ConflictError("Email already in use")

        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        # The store re-checks uniqueness atomically; a concurrent winner surfaces here as ConflictError
        user = await self._store(self.repo.create, email, password_hash, name)

        logger.info("User registered", extra={"userId": user.id, "email": email})
        return AuthResult(user=user, token=self.issuer.issue(user.id))

    async def login(self, email: str, password: str) -> AuthResult:
        """Authenticate by email and password.

        Unknown email and wrong password raise the same error.

        Raises:
            InvalidCredentialsError: credentials do not match
        """
        user = await self._store(self.repo.get_by_email, email)
        if not user:
            raise InvalidCredentialsError()

        if not await asyncio.to_thread(self.hasher.verify, password, user.password_hash):
            raise InvalidCredentialsError()

        logger.info("User logged in", extra={"userId": user.id, "email": email})
        return AuthResult(user=user, token=self.issuer.issue(user.id))

    async def me(self, user_id: str) -> User:
        """Return the session's user.

        Raises:
            NotFoundError: the user was removed after the token was issued
        """
        user = await self._store(self.repo.get_by_id, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def update(
        self,
        user_id: str,
        email: str | None = None,
        password: str | None = None,
        name: str | None = None,
    ) -> AuthResult:
        """Apply a sparse profile update and reissue the session token.

        Only supplied fields that differ from the stored record are written.
        Resubmitting one's own email is not a conflict.

        Raises:
            NotFoundError: user no longer exists
            ConflictError: email belongs to another user
        """
        current = await self.me(user_id)
        changes: dict[str, Any] = {}

        if email is not None and email != current.email:
            owner = await self._store(self.repo.get_by_email, email)
            if owner and owner.id != user_id:
                raise ConflictError("Email already in use")
            changes['email'] = email

        if name is not None and name != current.name:
            changes['name'] = name

        if password is not None:
            changes['password_hash'] = await asyncio.to_thread(self.hasher.hash, password)

        user = current
        if changes:
            user = await self._store(self.repo.update, user_id, changes)
            logger.info("User updated", extra={
                "userId": user_id,
                "fields": sorted('password' if k == 'password_hash' else k for k in changes),
            })

        return AuthResult(user=user, token=self.issuer.issue(user.id))
