"""Self-service profile reads and updates for an authenticated principal."""

import logging
from typing import Any, Mapping

from pazireshino.domain.shared.exceptions import ErrorCode, NotFoundError, ValidationError
from pazireshino_identity.application.services.credential_lifecycle_service import (
    duplicate_field_error,
)
from pazireshino_identity.domain.principal import (
    Principal,
    PrincipalAlreadyExistsError,
    PrincipalRepository,
)

logger = logging.getLogger(__name__)

PASSWORD_FIELDS = frozenset({"password", "password_confirm"})
PASSWORD_UPDATE_MESSAGE = (
    "This route is not for password updates. Please use /updateMyPassword."
)


class ProfileService:
    """Reads and edits the non-credential fields of a principal.

    Only ``ALLOWED_FIELDS`` ever reach the store; anything else in the
    request is dropped silently.
    """

    ALLOWED_FIELDS = ("first_name", "last_name", "email", "phone")

    def __init__(self, principal_repository: PrincipalRepository):
        self._principal_repo = principal_repository

    def get_me(self, principal: Principal) -> Principal:
        return principal

    async def update_me(
        self,
        principal: Principal,
        fields: Mapping[str, Any],
    ) -> Principal:
        if PASSWORD_FIELDS & {k for k, v in fields.items() if v is not None}:
            raise ValidationError(PASSWORD_UPDATE_MESSAGE)

        filtered = {
            k: v for k, v in fields.items() if k in self.ALLOWED_FIELDS and v is not None
        }
        if not filtered:
            return principal

        try:
            updated = await self._principal_repo.update_profile(principal.id, filtered)
        except PrincipalAlreadyExistsError as e:
            raise duplicate_field_error(e) from e

        if updated is None:
            raise NotFoundError("Principal not found", code=ErrorCode.USER_NOT_FOUND)

        logger.info(
            "Profile updated for principal %s: %s",
            principal.id,
            ", ".join(sorted(filtered)),
        )
        return updated
