"""Credential lifecycle: signup, login, password change and recovery."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from pazireshino.domain.shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DeliveryError,
    ErrorCode,
    InvalidResetTokenError,
    NotFoundError,
    RejectionReason,
    ValidationError,
)
from pazireshino.domain.shared.time import utc_now
from pazireshino_auth import (
    JWTService,
    PasswordHashingService,
    RecoveryTokenGenerator,
    WeakPasswordError,
)
from pazireshino_identity.application.ports import Notifier
from pazireshino_identity.application.services.auth_guard import UNKNOWN_SUBJECT_MESSAGE
from pazireshino_identity.domain.principal import (
    Principal,
    PrincipalAlreadyExistsError,
    PrincipalRepository,
)

logger = logging.getLogger(__name__)

PASSWORD_MISMATCH_MESSAGE = "Passwords are not the same!"
MISSING_CREDENTIALS_MESSAGE = "Please provide email and password!"
WRONG_CURRENT_PASSWORD_MESSAGE = "Your current password is wrong."
UNKNOWN_EMAIL_MESSAGE = "There is no user with that email address."


def duplicate_field_error(error: PrincipalAlreadyExistsError) -> ValidationError:
    return ValidationError(
        f"Duplicate field value: {error.field}. Please use another value!",
        code=ErrorCode.DUPLICATE_FIELD,
        details={"field": error.field},
    )


@dataclass(frozen=True)
class SignupData:
    first_name: str
    last_name: str
    email: str
    phone: str
    password: str = field(repr=False)
    password_confirm: str = field(repr=False)


class CredentialLifecycleService:
    """
    Application service for everything that creates or replaces a credential.

    Orchestrates the generic auth primitives (bcrypt hashing, JWT issuance,
    recovery secrets) with the Principal store and the notifier:
    - Signup and login
    - Password change for an authenticated principal
    - Forgot / reset password via a one-time recovery secret

    Every operation that ends with a valid credential returns a freshly
    issued bearer token. Hashing always runs off the event loop.
    """

    def __init__(  # noqa: PLR0913
        self,
        principal_repository: PrincipalRepository,
        password_service: PasswordHashingService,
        jwt_service: JWTService,
        recovery_tokens: RecoveryTokenGenerator,
        notifier: Notifier,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._principal_repo = principal_repository
        self._password_service = password_service
        self._jwt_service = jwt_service
        self._recovery_tokens = recovery_tokens
        self._notifier = notifier
        self._clock = clock

    async def signup(self, data: SignupData) -> tuple[Principal, str]:
        """Register a new principal and issue its first token.

        Raises
        ------
        ValidationError
            On password/confirm mismatch, an unusable password or a
            duplicate email or phone
        """
        password_hash = await self._hash_new_password(
            data.password,
            data.password_confirm,
        )

        principal = Principal.create(
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            phone=data.phone,
            password_hash=password_hash,
        )
        try:
            await self._principal_repo.add(principal)
        except PrincipalAlreadyExistsError as e:
            raise duplicate_field_error(e) from e

        token = self._jwt_service.issue(principal.id)

        logger.info("Principal signed up: %s", principal.id)
        return principal, token

    async def login(self, email: str, password: str) -> tuple[Principal, str]:
        """Authenticate by email and password.

        Unknown email and wrong password fail identically, in message and
        in the cost of the bcrypt comparison.
        """
        if not email or not password:
            raise ValidationError(MISSING_CREDENTIALS_MESSAGE)

        principal = await self._principal_repo.find_by_email(
            email,
            include_password=True,
        )
        if principal is None or not principal.password_hash:
            await self._password_service.verify_dummy_async(password)
            logger.info("Failed login for unknown email")
            raise AuthenticationError

        if not await self._password_service.verify_async(
            password,
            principal.password_hash,
        ):
            logger.info("Failed login for principal: %s", principal.id)
            raise AuthenticationError

        token = self._jwt_service.issue(principal.id)

        logger.info("Principal logged in: %s", principal.id)
        return principal, token

    async def change_password(
        self,
        principal: Principal,
        current_password: str,
        new_password: str,
        new_password_confirm: str,
    ) -> tuple[Principal, str]:
        """Replace the password of an authenticated principal.

        Tokens issued before the change stop being admitted by the gate.
        """
        stored = await self._principal_repo.find_by_id_with_password(principal.id)
        if stored is None or not stored.password_hash:
            raise AuthorizationError(
                UNKNOWN_SUBJECT_MESSAGE,
                RejectionReason.UNKNOWN_SUBJECT,
            )

        if not await self._password_service.verify_async(
            current_password or "",
            stored.password_hash,
        ):
            raise AuthenticationError(WRONG_CURRENT_PASSWORD_MESSAGE)

        password_hash = await self._hash_new_password(new_password, new_password_confirm)

        changed_at = self._clock()
        if not await self._principal_repo.update_password(
            stored.id,
            password_hash,
            changed_at,
        ):
            raise NotFoundError(
                "Principal not found",
                code=ErrorCode.USER_NOT_FOUND,
            )

        token = self._jwt_service.issue(stored.id)
        refreshed = await self._principal_repo.find_by_id(stored.id)

        logger.info("Password changed for principal: %s", stored.id)
        return refreshed or stored, token

    async def forgot_password(self, email: str, reset_url_base: str) -> None:
        """Start password recovery and deliver the raw secret out of band.

        A second request overwrites the first one's fingerprint. If delivery
        fails the stored fingerprint is cleared again, unless a newer request
        has replaced it meanwhile.

        Parameters
        ----------
        email
            The login identifier of the principal
        reset_url_base
            URL the raw secret gets appended to as the last path segment

        Raises
        ------
        NotFoundError
            No principal has that email
        DeliveryError
            The notifier failed; the pending reset was rolled back
        """
        principal = await self._principal_repo.find_by_email(email or "")
        if principal is None:
            raise NotFoundError(UNKNOWN_EMAIL_MESSAGE, code=ErrorCode.USER_NOT_FOUND)

        secret = self._recovery_tokens.generate()
        await self._principal_repo.set_password_reset(
            principal.id,
            secret.fingerprint,
            secret.expires_at,
        )

        reset_url = f"{reset_url_base.rstrip('/')}/{secret.raw}"
        try:
            await asyncio.to_thread(
                self._notifier.send_password_reset_email,
                principal.email,
                reset_url,
            )
        except Exception as e:
            cleared = await self._principal_repo.clear_password_reset(
                principal.id,
                secret.fingerprint,
            )
            logger.error(
                "Password reset delivery failed for principal %s (cleared=%s): %s",
                principal.id,
                cleared,
                e,
            )
            raise DeliveryError from e

        logger.info("Password reset requested for principal: %s", principal.id)

    async def reset_password(
        self,
        raw_secret: str,
        new_password: str,
        new_password_confirm: str,
    ) -> tuple[Principal, str]:
        """Consume a recovery secret and set a new password.

        The final update is conditional on the fingerprint still being live,
        so the same secret can be applied at most once.

        Raises
        ------
        InvalidResetTokenError
            The secret matches nothing, has expired or was already used
        ValidationError
            On password/confirm mismatch or an unusable password
        """
        fingerprint = self._recovery_tokens.fingerprint(raw_secret or "")
        now = self._clock()

        principal = await self._principal_repo.find_by_reset_fingerprint(fingerprint, now)
        if principal is None:
            raise InvalidResetTokenError

        password_hash = await self._hash_new_password(new_password, new_password_confirm)

        changed_at = self._clock()
        if not await self._principal_repo.consume_password_reset(
            principal.id,
            fingerprint,
            changed_at,
            password_hash,
            changed_at,
        ):
            raise InvalidResetTokenError

        token = self._jwt_service.issue(principal.id)
        refreshed = await self._principal_repo.find_by_id(principal.id)

        logger.info("Password reset for principal: %s", principal.id)
        return refreshed or principal, token

    async def _hash_new_password(self, password: str, password_confirm: str) -> str:
        if password != password_confirm:
            raise ValidationError(
                PASSWORD_MISMATCH_MESSAGE,
                code=ErrorCode.PASSWORD_MISMATCH,
            )
        try:
            return await self._password_service.hash_async(password)
        except WeakPasswordError as e:
            raise ValidationError(e.message) from e
