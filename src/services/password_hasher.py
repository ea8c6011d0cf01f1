"""One-way salted password hashing with bcrypt."""

import logging

import bcrypt

logger = logging.getLogger(__name__)

# 2^12 = 4096 iterations
DEFAULT_BCRYPT_ROUNDS = 12
# bcrypt reads at most 72 bytes and newer releases reject longer input
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash password with a fresh random salt."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode(password), salt).decode('utf-8')

    def verify(self, password: str, password_hash: str) -> bool:
        """Check password against hash. Malformed hashes verify as False."""
        if not password_hash:
            return False
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode('utf-8'))
        except ValueError:
            logger.warning("Stored password hash is malformed")
            return False
