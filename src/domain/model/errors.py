"""Domain-level exceptions.

Services raise these errors to express business rule violations.
The API layer maps them to HTTP status codes in one place (api/errors.py).
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class ConflictError(DomainError):
    """Entity with the same unique key already exists."""


class AuthenticationError(DomainError):
    """Caller could not be authenticated."""


class NoTokenError(AuthenticationError):
    """No session token was supplied with the request."""

    def __init__(self, message: str = "No token provided"):
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Session token is malformed, badly signed, or expired."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Email/password pair did not match. Deliberately vague."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class StoreUnavailableError(DomainError):
    """Credential store failed or did not answer in time."""
