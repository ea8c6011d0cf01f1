"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Annotated, Any, Literal, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    Field,
    StringConstraints,
    model_validator,
)

from domain.model.advice import AdviceFocus
from domain.model.user import User


def _check_email_syntax(value: str) -> str:
    """Accept a syntactically valid address and keep it exactly as sent."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"value is not a valid email address: {e}")
    return value


Email = Annotated[str, AfterValidator(_check_email_syntax)]
Password = Annotated[str, StringConstraints(min_length=6, max_length=128)]
DisplayName = Annotated[str, StringConstraints(min_length=2, max_length=255)]


def _blank_name_to_none(value: Any) -> Any:
    """An empty name means "no name"."""
    if value == "":
        return None
    return value


OptionalName = Annotated[Optional[DisplayName], BeforeValidator(_blank_name_to_none)]


# ── Auth requests ────────────────────────────────────────


class RegisterRequest(BaseModel):
    """Request model for user registration."""
    email: Email
    password: Password
    name: OptionalName = None


class LoginRequest(BaseModel):
    """Request model for user login."""
    email: Email
    password: Password


class UpdateRequest(BaseModel):
    """Sparse profile update. At least one field must be supplied."""
    email: Optional[Email] = None
    password: Optional[Password] = None
    name: OptionalName = None

    @model_validator(mode="after")
    def _require_any_field(self) -> "UpdateRequest":
        if self.email is None and self.password is None and self.name is None:
            raise ValueError("No fields to update")
        return self


# ── Auth responses ───────────────────────────────────────


class UserResponse(BaseModel):
    """Public view of a user. Never carries the password hash."""
    id: str
    email: str
    name: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AuthResponse(BaseModel):
    """Response model for flows that open a session."""
    user: UserResponse
    token: str


class MeResponse(BaseModel):
    user: UserResponse


# ── Advice ───────────────────────────────────────────────


class AdviceRequest(BaseModel):
    """Transaction summary submitted for advice."""
    focus: AdviceFocus = AdviceFocus.OVERVIEW
    goal: str = Field(..., min_length=1, max_length=1000)
    currency: str = Field(..., min_length=1, max_length=10)
    totals: dict[str, Any] = Field(default_factory=dict)
    transactions: list[dict[str, Any]] = Field(default_factory=list, max_length=500)
    language: Literal["en", "ru"] = "en"


class AdviceResponse(BaseModel):
    advice: str
