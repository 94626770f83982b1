"""FastAPI dependency injection for the Pazireshino API.

Provides dependencies for:
- Database sessions
- Auth primitives configured from settings
- Application services
- The current principal (request gate)
"""

import logging
from functools import lru_cache
from typing import Annotated, AsyncGenerator

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from pazireshino.presentation.api.config import SettingsDep
from pazireshino_auth import JWTService, PasswordHashingService, RecoveryTokenGenerator
from pazireshino_identity.application.ports import Notifier
from pazireshino_identity.application.services import (
    AuthGuard,
    CredentialLifecycleService,
    ProfileService,
)
from pazireshino_identity.domain.principal import Principal, PrincipalRepository
from pazireshino_identity.infrastructure.email import EmailService
from pazireshino_identity.infrastructure.persistence.sqlalchemy import (
    PrincipalRepositorySQLAlchemy,
)

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Database Engine & Session (Singleton per URL)
# -----------------------------------------------------------------------------


@lru_cache(maxsize=4)
def get_engine(database_url: str) -> AsyncEngine:
    """
    Get the shared async database engine for ``database_url``.

    The engine manages the connection pool and is reused across all requests.
    """
    return create_async_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before use
    )


@lru_cache(maxsize=4)
def get_session_maker(database_url: str) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        get_engine(database_url),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db_session(settings: SettingsDep) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    Yields
    ------
    AsyncSession for database operations
    """
    async with get_session_maker(settings.database_url)() as session:
        yield session


# Type alias for injected session
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


# -----------------------------------------------------------------------------
# Auth Primitives
# -----------------------------------------------------------------------------


def get_jwt_service(settings: SettingsDep) -> JWTService:
    """Get JWT service configured with API settings."""
    return JWTService(
        secret_key=settings.jwt_secret_key.get_secret_value(),
        expires_in_days=settings.jwt_expires_in_days,
    )


def get_password_service(settings: SettingsDep) -> PasswordHashingService:
    """Get password hashing service."""
    return PasswordHashingService(rounds=settings.password_hash_rounds)


def get_recovery_token_generator(settings: SettingsDep) -> RecoveryTokenGenerator:
    return RecoveryTokenGenerator(expire_minutes=settings.password_reset_expire_minutes)


def get_notifier(settings: SettingsDep) -> Notifier:
    return EmailService(settings)


def get_principal_repository(session: DBSession) -> PrincipalRepository:
    return PrincipalRepositorySQLAlchemy(session)


JWTServiceDep = Annotated[JWTService, Depends(get_jwt_service)]
PrincipalRepositoryDep = Annotated[PrincipalRepository, Depends(get_principal_repository)]


# -----------------------------------------------------------------------------
# Application Services
# -----------------------------------------------------------------------------


def get_credential_service(
    principal_repository: PrincipalRepositoryDep,
    jwt_service: JWTServiceDep,
    password_service: PasswordHashingService = Depends(get_password_service),
    recovery_tokens: RecoveryTokenGenerator = Depends(get_recovery_token_generator),
    notifier: Notifier = Depends(get_notifier),
) -> CredentialLifecycleService:
    """
    Get the credential lifecycle service with all dependencies.

    This service orchestrates signup, login, password change and recovery.
    """
    return CredentialLifecycleService(
        principal_repository=principal_repository,
        password_service=password_service,
        jwt_service=jwt_service,
        recovery_tokens=recovery_tokens,
        notifier=notifier,
    )


def get_profile_service(principal_repository: PrincipalRepositoryDep) -> ProfileService:
    return ProfileService(principal_repository)


def get_auth_guard(
    principal_repository: PrincipalRepositoryDep,
    jwt_service: JWTServiceDep,
) -> AuthGuard:
    return AuthGuard(jwt_service, principal_repository)


# Type aliases for injected services
CredentialService = Annotated[
    CredentialLifecycleService,
    Depends(get_credential_service),
]
ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]


# -----------------------------------------------------------------------------
# Current Principal (request gate)
# -----------------------------------------------------------------------------


async def get_current_principal(
    request: Request,
    guard: AuthGuard = Depends(get_auth_guard),
    authorization: Annotated[str | None, Header()] = None,
) -> Principal:
    """
    FastAPI dependency admitting the request through the AuthGuard.

    The admitted principal is also attached to ``request.state.principal``
    for downstream handlers.

    Raises
    ------
    AuthorizationError
        Rendered as 401 by the exception handlers
    """
    principal = await guard.authorize(authorization)
    request.state.principal = principal
    return principal


# Type alias for injected current principal
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
