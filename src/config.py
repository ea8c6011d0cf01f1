"""Process-wide configuration, read once from the environment.

Everything here is immutable after startup; components receive the values
they need through FastAPI dependencies instead of reading os.environ.
"""

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

MIN_JWT_SECRET_LENGTH = 32
SAMPLE_JWT_SECRET = "your-secret-key-change-in-production-min-32-chars-long"


class ConfigError(ValueError):
    """Configuration is missing or unusable. Fatal at startup."""


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    app_env: str = "development"
    mongo_url: str | None = None
    mongo_database: str = "finmon"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    openai_api_key: str | None = None
    advice_model: str = "openai/gpt-4o-mini"
    store_timeout_seconds: float = 5.0
    advice_timeout_seconds: float = 30.0
    bcrypt_rounds: int = 12
    session_ttl_days: int = 7

    def __post_init__(self):
        if not self.jwt_secret or len(self.jwt_secret) < MIN_JWT_SECRET_LENGTH:
            raise ConfigError(
                f"JWT_SECRET must be set and at least {MIN_JWT_SECRET_LENGTH} characters long. "
                "Generate a secure key with: openssl rand -hex 32"
            )

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (and a .env file if present)."""
        load_dotenv()

        cors_env = os.getenv("CORS_ORIGINS", "*")
        settings = cls(
            jwt_secret=os.getenv("JWT_SECRET", ""),
            app_env=os.getenv("APP_ENV", "development"),
            mongo_url=os.getenv("MONGO_URL") or None,
            mongo_database=os.getenv("MONGODB_DATABASE", "finmon"),
            cors_origins=[o.strip() for o in cors_env.split(",") if o.strip()],
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            advice_model=os.getenv("ADVICE_MODEL", "openai/gpt-4o-mini"),
            store_timeout_seconds=_float_env("STORE_TIMEOUT_SECONDS", 5.0),
            advice_timeout_seconds=_float_env("ADVICE_TIMEOUT_SECONDS", 30.0),
            bcrypt_rounds=int(_float_env("BCRYPT_ROUNDS", 12)),
        )

        if settings.jwt_secret == SAMPLE_JWT_SECRET:
            logger.warning("Using the sample JWT_SECRET. Change it before deploying to production.")
        return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings.from_env()
