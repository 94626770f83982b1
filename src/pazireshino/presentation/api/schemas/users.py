"""User schemas for the authentication and profile endpoints.

Request and response bodies use camelCase keys (``firstName``,
``passwordConfirm``, ``passwordCurrent``).
"""

from datetime import datetime
from uuid import UUID

from pydantic import ConfigDict, EmailStr, Field
from pazireshino.presentation.api.schemas.common import CamelModel
from pazireshino_identity.domain.principal import Principal


class SignupRequest(CamelModel):
    """Request schema for student signup."""

    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=20)
    password: str
    password_confirm: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "firstName": "Sara",
                "lastName": "Ahmadi",
                "email": "sara@example.com",
                "phone": "09120000000",
                "password": "abc123",
                "passwordConfirm": "abc123",
            },
        },
    )


class LoginRequest(CamelModel):
    """Request schema for login.

    Both fields are optional here so a missing one yields the same
    "Please provide email and password!" error as an empty one.
    """

    email: str | None = None
    password: str | None = None


class ForgotPasswordRequest(CamelModel):
    email: str = ""


class ResetPasswordRequest(CamelModel):
    password: str
    password_confirm: str


class UpdatePasswordRequest(CamelModel):
    password_current: str
    password: str
    password_confirm: str


class UpdateMeRequest(CamelModel):
    """Profile update. Password fields are accepted only to be refused."""

    first_name: str | None = Field(default=None, min_length=1, max_length=50)
    last_name: str | None = Field(default=None, min_length=1, max_length=50)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, min_length=1, max_length=20)
    password: str | None = None
    password_confirm: str | None = None


class UserResponse(CamelModel):
    """Public view of a principal. Never carries credential state."""

    id: UUID
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: str
    profile_image: str | None = None
    created_at: datetime

    @classmethod
    def from_principal(cls, principal: Principal) -> "UserResponse":
        return cls(
            id=principal.id,
            first_name=principal.first_name,
            last_name=principal.last_name,
            full_name=principal.full_name,
            email=principal.email,
            phone=principal.phone,
            profile_image=principal.profile_image,
            created_at=principal.created_at,
        )


class UserData(CamelModel):
    user: UserResponse


class UserEnvelope(CamelModel):
    """Response schema for endpoints returning the principal only."""

    status: str = "success"
    data: UserData

    @classmethod
    def of(cls, principal: Principal) -> "UserEnvelope":
        return cls(data=UserData(user=UserResponse.from_principal(principal)))


class AuthResponse(CamelModel):
    """Response schema for every endpoint that issues a bearer token."""

    status: str = "success"
    token: str
    data: UserData

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "success",
                "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "data": {
                    "user": {
                        "id": "550e8400-e29b-41d4-a716-446655440000",
                        "firstName": "Sara",
                        "lastName": "Ahmadi",
                        "email": "sara@example.com",
                        "phone": "09120000000",
                        "profileImage": None,
                        "createdAt": "2024-12-05T10:30:00Z",
                    },
                },
            },
        },
    )

    @classmethod
    def of(cls, principal: Principal, token: str) -> "AuthResponse":
        return cls(token=token, data=UserData(user=UserResponse.from_principal(principal)))
