from pazireshino.presentation.api.schemas.common import (
    ErrorResponse,
    HealthResponse,
    MessageResponse,
)
from pazireshino.presentation.api.schemas.users import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
    UpdateMeRequest,
    UpdatePasswordRequest,
    UserEnvelope,
    UserResponse,
)

__all__ = [
    "AuthResponse",
    "ErrorResponse",
    "ForgotPasswordRequest",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "ResetPasswordRequest",
    "SignupRequest",
    "UpdateMeRequest",
    "UpdatePasswordRequest",
    "UserEnvelope",
    "UserResponse",
]
