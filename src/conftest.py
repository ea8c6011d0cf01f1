"""Test environment defaults. Runs before any test module imports api.main."""

import os

os.environ.setdefault("JWT_SECRET", "test-jwt-secret-that-is-at-least-32-chars")
os.environ.setdefault("APP_ENV", "test")
# bcrypt's minimum cost keeps the suite fast
os.environ.setdefault("BCRYPT_ROUNDS", "4")
