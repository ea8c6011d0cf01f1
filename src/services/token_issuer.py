"""Signed, time-bounded session tokens (HS256 JWT)."""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from domain.model.errors import InvalidTokenError
from domain.model.session import SessionClaims

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_DAYS = 7


class TokenIssuer:
    """Issues and verifies session tokens with a process-wide secret."""

    def __init__(self, secret: str, ttl: timedelta = timedelta(days=JWT_EXPIRATION_DAYS)):
        self._secret = secret
        self.ttl = ttl

    def issue(self, user_id: str) -> str:
        """Create a token for user_id that expires after the configured TTL."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "iat": now,
            "exp": now + self.ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def verify(self, token: str) -> SessionClaims:
        """Verify signature and expiry.

        Raises:
            InvalidTokenError: bad signature, malformed payload, or expired token
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[JWT_ALGORITHM])
        except JWTError as e:
            logger.debug(f"JWT verification failed: {e}")
            raise InvalidTokenError() from e

        user_id = payload.get("sub")
        exp = payload.get("exp")
        if not isinstance(user_id, str) or not user_id or exp is None:
            raise InvalidTokenError()

        return SessionClaims(user_id=user_id)
