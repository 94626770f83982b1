"""Users router: signup, login, password lifecycle and own profile."""

import logging

from fastapi import APIRouter, Request, status

from pazireshino.presentation.api.config import (
    API_V1_PREFIX,
    USERS_PREFIX,
    SettingsDep,
)
from pazireshino.presentation.api.dependencies import (
    CredentialService,
    CurrentPrincipal,
    ProfileServiceDep,
)
from pazireshino.presentation.api.schemas.common import ErrorResponse, MessageResponse
from pazireshino.presentation.api.schemas.users import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
    UpdateMeRequest,
    UpdatePasswordRequest,
    UserEnvelope,
)
from pazireshino_identity.application.services import SignupData

logger = logging.getLogger(__name__)

router = APIRouter()

RESET_SENT_MESSAGE = "Token sent to email!"


def _reset_url_base(request: Request, reset_url_base: str | None) -> str:
    origin = (reset_url_base or str(request.base_url)).rstrip("/")
    return f"{origin}{API_V1_PREFIX}{USERS_PREFIX}/resetPassword"


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new student",
    responses={
        201: {"description": "Principal created, token issued"},
        400: {"model": ErrorResponse, "description": "Mismatch or duplicate field"},
    },
)
async def signup(body: SignupRequest, service: CredentialService) -> AuthResponse:
    principal, token = await service.signup(
        SignupData(
            first_name=body.first_name,
            last_name=body.last_name,
            email=body.email,
            phone=body.phone,
            password=body.password,
            password_confirm=body.password_confirm,
        ),
    )
    return AuthResponse.of(principal, token)


@router.post(
    "/login",
    summary="Authenticate with email and password",
    responses={
        200: {"description": "Login successful"},
        401: {"model": ErrorResponse, "description": "Incorrect email or password"},
    },
)
async def login(body: LoginRequest, service: CredentialService) -> AuthResponse:
    principal, token = await service.login(body.email or "", body.password or "")
    return AuthResponse.of(principal, token)


@router.post(
    "/forgotPassword",
    summary="Send a password reset link by email",
    responses={
        200: {"description": "Reset link sent"},
        404: {"model": ErrorResponse, "description": "Unknown email"},
        500: {"model": ErrorResponse, "description": "Email delivery failed"},
    },
)
async def forgot_password(
    body: ForgotPasswordRequest,
    request: Request,
    service: CredentialService,
    settings: SettingsDep,
) -> MessageResponse:
    """
    Start password recovery.

    The raw reset token only ever leaves the server inside the email; the
    response is a bare acknowledgement.
    """
    await service.forgot_password(
        body.email,
        _reset_url_base(request, settings.reset_url_base),
    )
    return MessageResponse(message=RESET_SENT_MESSAGE)


@router.patch(
    "/resetPassword/{token}",
    summary="Set a new password with a reset token",
    responses={
        200: {"description": "Password reset, token issued"},
        400: {"model": ErrorResponse, "description": "Token is invalid or has expired"},
    },
)
async def reset_password(
    token: str,
    body: ResetPasswordRequest,
    service: CredentialService,
) -> AuthResponse:
    principal, new_token = await service.reset_password(
        token,
        body.password,
        body.password_confirm,
    )
    return AuthResponse.of(principal, new_token)


@router.patch(
    "/updateMyPassword",
    summary="Change the current password",
    responses={
        200: {"description": "Password changed, token issued"},
        401: {"model": ErrorResponse, "description": "Not logged in or wrong password"},
    },
)
async def update_my_password(
    body: UpdatePasswordRequest,
    principal: CurrentPrincipal,
    service: CredentialService,
) -> AuthResponse:
    """
    Change the password of the logged-in principal.

    Every token issued before this call stops working.
    """
    updated, token = await service.change_password(
        principal,
        body.password_current,
        body.password,
        body.password_confirm,
    )
    return AuthResponse.of(updated, token)


@router.get(
    "/me",
    summary="Get the current principal",
    responses={401: {"model": ErrorResponse, "description": "Not logged in"}},
)
async def get_me(principal: CurrentPrincipal, service: ProfileServiceDep) -> UserEnvelope:
    return UserEnvelope.of(service.get_me(principal))


@router.patch(
    "/updateMe",
    summary="Update own profile fields",
    responses={
        400: {"model": ErrorResponse, "description": "Password fields or duplicate value"},
        401: {"model": ErrorResponse, "description": "Not logged in"},
    },
)
async def update_me(
    body: UpdateMeRequest,
    principal: CurrentPrincipal,
    service: ProfileServiceDep,
) -> UserEnvelope:
    updated = await service.update_me(principal, body.model_dump(exclude_unset=True))
    return UserEnvelope.of(updated)
