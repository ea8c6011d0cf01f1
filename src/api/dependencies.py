from datetime import timedelta

from fastapi import Depends, Request

from adapter.external.litellm import LiteLLMAdapter
from adapter.mongodb.user_repository import MongoUserRepository
from config import Settings
from domain.model.errors import StoreUnavailableError
from port.llm import LLMPort
from port.user_repository import UserRepository
from services.advice_service import AdviceService
from services.auth_service import AuthService
from services.password_hasher import PasswordHasher
from services.token_issuer import TokenIssuer


def get_settings(request: Request) -> Settings:
    """Settings the app was built with (see api.main.create_app)."""
    return request.app.state.settings


def _get_db(request: Request):
    """Get MongoDB database from the client opened at startup."""
    client = getattr(request.app.state, "mongo_client", None)
    if client is None:
        raise StoreUnavailableError("Database unavailable")
    return client[request.app.state.mongo_database]


def get_user_repo(request: Request) -> UserRepository:
    return MongoUserRepository(_get_db(request))


def get_password_hasher(settings: Settings = Depends(get_settings)) -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)


def get_token_issuer(settings: Settings = Depends(get_settings)) -> TokenIssuer:
    return TokenIssuer(settings.jwt_secret, ttl=timedelta(days=settings.session_ttl_days))


def get_auth_service(
    repo: UserRepository = Depends(get_user_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
    issuer: TokenIssuer = Depends(get_token_issuer),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(repo, hasher, issuer, store_timeout=settings.store_timeout_seconds)


def get_llm_port(settings: Settings = Depends(get_settings)) -> LLMPort:
    return LiteLLMAdapter(api_key=settings.openai_api_key)


def get_advice_service(
    llm: LLMPort = Depends(get_llm_port),
    settings: Settings = Depends(get_settings),
) -> AdviceService:
    return AdviceService(
        llm,
        model=settings.advice_model,
        timeout=settings.advice_timeout_seconds,
        configured=bool(settings.openai_api_key),
    )
