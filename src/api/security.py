"""Session resolution for protected routes, plus session cookie helpers.

A token is read from the Authorization header first and from the
``finmon_session`` cookie second. Resolution is stateless: the token is
verified, never looked up.
"""

import logging
from typing import Awaitable, Callable, Optional, TypeVar

from fastapi import Depends, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ValidationError

from api.dependencies import get_token_issuer
from config import Settings
from domain.model.errors import NoTokenError
from services.token_issuer import TokenIssuer

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "finmon_session"

security = HTTPBearer(auto_error=False)

M = TypeVar("M", bound=BaseModel)


def extract_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> str | None:
    """Return the bearer token if present, otherwise the session cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(SESSION_COOKIE_NAME) or None


def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> str:
    """Resolve the session to a user id (required). Raises 401 when absent or invalid.

    The resolved id is also stored on ``request.state.user_id``.
    """
    token = extract_token(request, credentials)
    if not token:
        raise NoTokenError()

    claims = issuer.verify(token)
    request.state.user_id = claims.user_id
    return claims.user_id


def session_body(model: type[M]) -> Callable[..., Awaitable[M]]:
    """Dependency that parses the JSON body as ``model`` once the session has resolved.

    Protected routes take their body through this instead of a declared body
    parameter: an anonymous caller gets 401 whatever the body contains.
    """
    async def parse(
        request: Request,
        user_id: str = Depends(get_current_user_id),
    ) -> M:
        try:
            payload = await request.json()
        except ValueError as e:
            raise RequestValidationError([{
                "type": "json_invalid",
                "loc": ("body",),
                "msg": "JSON decode error",
                "input": {},
            }]) from e

        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise RequestValidationError(
                [{**err, "loc": ("body", *err["loc"])} for err in e.errors()]
            ) from e

    return parse


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.session_ttl_days * 24 * 60 * 60,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )

