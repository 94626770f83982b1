"""SQLAlchemy implementation of PrincipalRepository.

Each mutation is one UPDATE/INSERT statement committed on its own, so a
principal's credential state never depends on a read done in an earlier
round trip.
"""

import logging
from datetime import datetime
from typing import Mapping
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pazireshino.domain.shared.time import utc_now
from pazireshino_identity.domain.principal import (
    Principal,
    PrincipalAlreadyExistsError,
    PrincipalRepository,
)
from pazireshino_identity.infrastructure.persistence.sqlalchemy.models import (
    PrincipalModel,
)

logger = logging.getLogger(__name__)

UNIQUE_FIELDS = ("phone", "email")
PROFILE_COLUMNS = frozenset({"first_name", "last_name", "email", "phone", "profile_image"})


def _duplicate_field(error: IntegrityError) -> str:
    text = str(error.orig).lower()
    for field in UNIQUE_FIELDS:
        if field in text:
            return field
    return "value"


class PrincipalRepositorySQLAlchemy(PrincipalRepository):
    """SQLAlchemy implementation of the PrincipalRepository interface."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, principal_id: UUID) -> Principal | None:
        model = await self._find_one(PrincipalModel.id == principal_id)
        return self._map_to_domain(model) if model else None

    async def find_by_id_with_password(self, principal_id: UUID) -> Principal | None:
        model = await self._find_one(PrincipalModel.id == principal_id)
        return self._map_to_domain(model, include_password=True) if model else None

    async def find_by_email(
        self,
        email: str,
        include_password: bool = False,
    ) -> Principal | None:
        model = await self._find_one(PrincipalModel.email == email.strip().lower())
        if model is None:
            return None
        return self._map_to_domain(model, include_password=include_password)

    async def find_by_reset_fingerprint(
        self,
        fingerprint: str,
        now: datetime,
    ) -> Principal | None:
        model = await self._find_one(
            PrincipalModel.password_reset_fingerprint == fingerprint,
            PrincipalModel.password_reset_expires_at > now,
        )
        return self._map_to_domain(model) if model else None

    async def add(self, principal: Principal) -> None:
        self._session.add(self._map_to_model(principal))
        try:
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            field = _duplicate_field(e)
            logger.info("Rejected duplicate %s on signup", field)
            raise PrincipalAlreadyExistsError(field) from e

        logger.info("Created principal: %s", principal.id)

    async def update_password(
        self,
        principal_id: UUID,
        password_hash: str,
        changed_at: datetime,
    ) -> bool:
        updated = await self._execute_update(
            (PrincipalModel.id == principal_id,),
            password_hash=password_hash,
            password_changed_at=changed_at,
        )
        if updated:
            logger.debug("Updated password for principal: %s", principal_id)
        return updated

    async def set_password_reset(
        self,
        principal_id: UUID,
        fingerprint: str,
        expires_at: datetime,
    ) -> bool:
        return await self._execute_update(
            (PrincipalModel.id == principal_id,),
            password_reset_fingerprint=fingerprint,
            password_reset_expires_at=expires_at,
        )

    async def clear_password_reset(self, principal_id: UUID, fingerprint: str) -> bool:
        return await self._execute_update(
            (
                PrincipalModel.id == principal_id,
                PrincipalModel.password_reset_fingerprint == fingerprint,
            ),
            password_reset_fingerprint=None,
            password_reset_expires_at=None,
        )

    async def consume_password_reset(  # noqa: PLR0913
        self,
        principal_id: UUID,
        fingerprint: str,
        now: datetime,
        password_hash: str,
        changed_at: datetime,
    ) -> bool:
        return await self._execute_update(
            (
                PrincipalModel.id == principal_id,
                PrincipalModel.password_reset_fingerprint == fingerprint,
                PrincipalModel.password_reset_expires_at > now,
            ),
            password_hash=password_hash,
            password_changed_at=changed_at,
            password_reset_fingerprint=None,
            password_reset_expires_at=None,
        )

    async def update_profile(
        self,
        principal_id: UUID,
        fields: Mapping[str, str],
    ) -> Principal | None:
        values = {k: v for k, v in fields.items() if k in PROFILE_COLUMNS}
        if "email" in values:
            values["email"] = values["email"].strip().lower()

        if values:
            try:
                await self._execute_update((PrincipalModel.id == principal_id,), **values)
            except IntegrityError as e:
                raise PrincipalAlreadyExistsError(_duplicate_field(e)) from e

        return await self.find_by_id(principal_id)

    async def _find_one(self, *criteria) -> PrincipalModel | None:
        stmt = (
            select(PrincipalModel)
            .where(*criteria)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def _execute_update(self, criteria: tuple, **values) -> bool:
        stmt = (
            update(PrincipalModel)
            .where(*criteria)
            .values(**values, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._session.execute(stmt)
            await self._session.commit()
        except IntegrityError:
            await self._session.rollback()
            raise
        return result.rowcount > 0

    def _map_to_domain(
        self,
        model: PrincipalModel,
        include_password: bool = False,
    ) -> Principal:
        return Principal.reconstitute(
            id=model.id,
            first_name=model.first_name,
            last_name=model.last_name,
            email=model.email,
            phone=model.phone,
            password_hash=model.password_hash if include_password else None,
            password_changed_at=model.password_changed_at,
            password_reset_fingerprint=model.password_reset_fingerprint,
            password_reset_expires_at=model.password_reset_expires_at,
            profile_image=model.profile_image,
            created_at=model.created_at,
        )

    def _map_to_model(self, principal: Principal) -> PrincipalModel:
        return PrincipalModel(
            id=principal.id,
            first_name=principal.first_name,
            last_name=principal.last_name,
            email=principal.email,
            phone=principal.phone,
            password_hash=principal.password_hash,
            password_changed_at=principal.password_changed_at,
            password_reset_fingerprint=principal.password_reset_fingerprint,
            password_reset_expires_at=principal.password_reset_expires_at,
            profile_image=principal.profile_image,
            created_at=principal.created_at,
            updated_at=principal.created_at,
        )
