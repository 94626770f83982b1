"""Request gate for protected routes.

The gate is an ordered tuple of stages. Each stage takes the context built so
far and either returns it enriched or raises ``AuthorizationError``; the first
rejection ends the pipeline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Awaitable, Callable

from pazireshino.domain.shared.exceptions import AuthorizationError, RejectionReason
from pazireshino.domain.shared.time import truncate_to_seconds
from pazireshino_auth import InvalidTokenError, JWTService, TokenPayload
from pazireshino_identity.domain.principal import Principal, PrincipalRepository

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

NOT_LOGGED_IN_MESSAGE = "You are not logged in! Please log in to get access."
INVALID_TOKEN_MESSAGE = "Invalid token. Please log in again!"
UNKNOWN_SUBJECT_MESSAGE = "The user belonging to this token does no longer exist."
PASSWORD_CHANGED_MESSAGE = "User recently changed password! Please log in again."


@dataclass(frozen=True)
class GuardContext:
    """What the gate has learned about a request so far."""

    authorization: str | None
    token: str | None = None
    payload: TokenPayload | None = None
    principal: Principal | None = None

    def require_payload(self) -> TokenPayload:
        if self.payload is None:
            msg = "verify_token must run before this stage"
            raise RuntimeError(msg)
        return self.payload

    def require_principal(self) -> Principal:
        if self.principal is None:
            msg = "load_principal must run before this stage"
            raise RuntimeError(msg)
        return self.principal


Stage = Callable[[GuardContext], Awaitable[GuardContext]]


def password_changed_after(principal: Principal, issued_at: datetime) -> bool:
    """Whether the principal's password changed strictly after ``issued_at``.

    Both sides are compared at whole-second resolution, so a token issued in
    the same second as the change stays valid.
    """
    if principal.password_changed_at is None:
        return False
    return truncate_to_seconds(principal.password_changed_at) > issued_at


class AuthGuard:
    """Admits a request carrying a live bearer token for an existing principal.

    Stages, in order:

    1. ``extract_token``: an ``Authorization: Bearer <token>`` header is present
    2. ``verify_token``: the token decodes, the signature holds, not expired
    3. ``load_principal``: the subject still exists
    4. ``check_password_change``: the password did not change after issuance
    """

    def __init__(
        self,
        jwt_service: JWTService,
        principal_repository: PrincipalRepository,
    ):
        self._jwt_service = jwt_service
        self._principal_repo = principal_repository
        self._stages: tuple[Stage, ...] = (
            self.extract_token,
            self.verify_token,
            self.load_principal,
            self.check_password_change,
        )

    @property
    def stages(self) -> tuple[Stage, ...]:
        return self._stages

    async def authorize(self, authorization: str | None) -> Principal:
        """Run every stage and return the admitted principal.

        Parameters
        ----------
        authorization
            Raw value of the ``Authorization`` header, if any

        Raises
        ------
        AuthorizationError
            With the ``RejectionReason`` of the first failing stage
        """
        context = GuardContext(authorization=authorization)
        for stage in self._stages:
            context = await stage(context)

        return context.require_principal()

    async def extract_token(self, context: GuardContext) -> GuardContext:
        header = context.authorization or ""
        if not header.startswith(BEARER_PREFIX):
            raise AuthorizationError(
                NOT_LOGGED_IN_MESSAGE,
                RejectionReason.NO_CREDENTIAL,
            )

        token = header[len(BEARER_PREFIX) :].strip()
        if not token:
            raise AuthorizationError(
                NOT_LOGGED_IN_MESSAGE,
                RejectionReason.NO_CREDENTIAL,
            )
        return replace(context, token=token)

    async def verify_token(self, context: GuardContext) -> GuardContext:
        try:
            payload = self._jwt_service.verify(context.token or "")
        except InvalidTokenError as e:
            logger.debug("Rejected bearer token: %s", e.message)
            raise AuthorizationError(
                INVALID_TOKEN_MESSAGE,
                RejectionReason.INVALID_OR_EXPIRED_TOKEN,
            ) from e
        return replace(context, payload=payload)

    async def load_principal(self, context: GuardContext) -> GuardContext:
        subject_id = context.require_payload().subject_id
        principal = await self._principal_repo.find_by_id(subject_id)
        if principal is None:
            raise AuthorizationError(
                UNKNOWN_SUBJECT_MESSAGE,
                RejectionReason.UNKNOWN_SUBJECT,
                details={"subject_id": str(subject_id)},
            )
        return replace(context, principal=principal)

    async def check_password_change(self, context: GuardContext) -> GuardContext:
        principal = context.require_principal()
        if password_changed_after(principal, context.require_payload().issued_at):
            raise AuthorizationError(
                PASSWORD_CHANGED_MESSAGE,
                RejectionReason.PASSWORD_CHANGED,
                details={"subject_id": str(principal.id)},
            )
        return context
