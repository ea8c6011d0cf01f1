"""Authentication routes (register, login, me, update, logout).

Successful register/login/update return the token in the body and also set
it as the ``finmon_session`` cookie, so browser and API clients both work.
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_auth_service, get_settings
from api.models import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    UpdateRequest,
    UserResponse,
)
from api.security import (
    clear_session_cookie,
    get_current_user_id,
    session_body,
    set_session_cookie,
)
from config import Settings
from domain.model.session import AuthResult
from services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _session_response(result: AuthResult, response: Response, settings: Settings) -> AuthResponse:
    set_session_cookie(response, result.token, settings)
    return AuthResponse(user=UserResponse.from_domain(result.user), token=result.token)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    """Register a new user.

    Raises:
        409 Conflict if email already exists, 400 if the payload is invalid
    """
    result = await service.register(request.email, request.password, request.name)
    return _session_response(result, response, settings)


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    """Login user and open a session.

    Raises:
        401 if credentials are invalid (same message for unknown email and wrong password)
    """
    result = await service.login(request.email, request.password)
    return _session_response(result, response, settings)


@router.get("/me", response_model=MeResponse)
async def get_me(
    user_id: str = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service),
):
    """Get current authenticated user info."""
    user = await service.me(user_id)
    return MeResponse(user=UserResponse.from_domain(user))


@router.put("/update", response_model=AuthResponse)
async def update(
    response: Response,
    user_id: str = Depends(get_current_user_id),
    request: UpdateRequest = Depends(session_body(UpdateRequest)),
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    """Sparse profile update; returns a fresh token.

    Raises:
        400 if no fields are supplied, 409 if the email belongs to another user
    """
    result = await service.update(
        user_id,
        email=request.email,
        password=request.password,
        name=request.name,
    )
    return _session_response(result, response, settings)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(settings: Settings = Depends(get_settings)):
    """Clear the session cookie. Always succeeds.

    The token itself stays valid until it expires; there is no server-side revocation.
    """
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_session_cookie(response, settings)
    return response
