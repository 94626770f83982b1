"""Principal repository interface (the credential store)."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Mapping
from uuid import UUID

from pazireshino_identity.domain.principal.aggregates.principal import Principal


class PrincipalRepository(ABC):
    """Repository interface for Principal aggregates.

    Every mutating method is a single atomic store operation. Implementations
    must not read-modify-write across round trips, since concurrent requests
    against the same principal are expected.
    """

    @abstractmethod
    async def find_by_id(self, principal_id: UUID) -> Principal | None:
        """Find a principal by ID (without the password hash)."""

    @abstractmethod
    async def find_by_email(
        self,
        email: str,
        include_password: bool = False,
    ) -> Principal | None:
        """Find a principal by login identifier.

        Parameters
        ----------
        email
            The login identifier (case-insensitive)
        include_password
            Also load the otherwise hidden password hash
        """

    @abstractmethod
    async def find_by_id_with_password(self, principal_id: UUID) -> Principal | None:
        """Find a principal by ID, including the password hash."""

    @abstractmethod
    async def find_by_reset_fingerprint(
        self,
        fingerprint: str,
        now: datetime,
    ) -> Principal | None:
        """Find the principal holding ``fingerprint`` with an expiry after ``now``."""

    @abstractmethod
    async def add(self, principal: Principal) -> None:
        """Persist a new principal.

        Raises
        ------
        PrincipalAlreadyExistsError
            If email or phone is already taken
        """

    @abstractmethod
    async def update_password(
        self,
        principal_id: UUID,
        password_hash: str,
        changed_at: datetime,
    ) -> bool:
        """Replace the hash and stamp ``password_changed_at`` in one update.

        Returns False if the principal does not exist.
        """

    @abstractmethod
    async def set_password_reset(
        self,
        principal_id: UUID,
        fingerprint: str,
        expires_at: datetime,
    ) -> bool:
        """Store a reset fingerprint and expiry, overwriting any previous one."""

    @abstractmethod
    async def clear_password_reset(self, principal_id: UUID, fingerprint: str) -> bool:
        """Clear the reset fields, but only while they still hold ``fingerprint``."""

    @abstractmethod
    async def consume_password_reset(  # noqa: PLR0913
        self,
        principal_id: UUID,
        fingerprint: str,
        now: datetime,
        password_hash: str,
        changed_at: datetime,
    ) -> bool:
        """Apply a password reset guarded on a live matching fingerprint.

        Sets the new hash and ``password_changed_at`` and clears the reset
        fields in one conditional update. Returns False if the fingerprint no
        longer matches or has expired (e.g. a concurrent reset won).
        """

    @abstractmethod
    async def update_profile(
        self,
        principal_id: UUID,
        fields: Mapping[str, str],
    ) -> Principal | None:
        """Update allow-listed profile fields and return the fresh principal.

        Raises
        ------
        PrincipalAlreadyExistsError
            If the new email or phone is already taken
        """
