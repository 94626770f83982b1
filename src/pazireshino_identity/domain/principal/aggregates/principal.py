"""Principal aggregate: the authenticable identity."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from pazireshino.domain.shared.time import ensure_tz_aware, utc_now


class Principal:
    """
    Principal aggregate root.

    Holds the profile fields a student signs up with plus the credential
    state: the bcrypt hash, when the password last changed and the pending
    password-reset fingerprint, if any.

    ``password_hash`` is None whenever the principal was loaded without the
    hidden credential column.
    """

    def __init__(  # noqa: PLR0913
        self,
        first_name: str,
        last_name: str,
        email: str,
        phone: str,
        password_hash: str | None = None,
        id: UUID | None = None,
        password_changed_at: datetime | None = None,
        password_reset_fingerprint: str | None = None,
        password_reset_expires_at: datetime | None = None,
        profile_image: str | None = None,
        created_at: datetime | None = None,
    ):
        self._id = id or uuid4()
        self._first_name = first_name.strip()
        self._last_name = last_name.strip()
        self._email = email.strip().lower()
        self._phone = phone.strip()
        self._password_hash = password_hash
        self._password_changed_at = (
            ensure_tz_aware(password_changed_at) if password_changed_at else None
        )
        self._password_reset_fingerprint = password_reset_fingerprint
        self._password_reset_expires_at = (
            ensure_tz_aware(password_reset_expires_at)
            if password_reset_expires_at
            else None
        )
        self._profile_image = profile_image
        self._created_at = ensure_tz_aware(created_at) if created_at else utc_now()

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def first_name(self) -> str:
        return self._first_name

    @property
    def last_name(self) -> str:
        return self._last_name

    @property
    def full_name(self) -> str:
        return f"{self._first_name} {self._last_name}"

    @property
    def email(self) -> str:
        return self._email

    @property
    def phone(self) -> str:
        return self._phone

    @property
    def password_hash(self) -> str | None:
        return self._password_hash

    @property
    def password_changed_at(self) -> datetime | None:
        return self._password_changed_at

    @property
    def password_reset_fingerprint(self) -> str | None:
        return self._password_reset_fingerprint

    @property
    def password_reset_expires_at(self) -> datetime | None:
        return self._password_reset_expires_at

    @property
    def profile_image(self) -> str | None:
        return self._profile_image

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @classmethod
    def create(
        cls,
        first_name: str,
        last_name: str,
        email: str,
        phone: str,
        password_hash: str,
    ) -> Principal:
        if not password_hash:
            msg = "A principal cannot be created without a password hash"
            raise ValueError(msg)
        return cls(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            password_hash=password_hash,
        )

    @classmethod
    def reconstitute(  # noqa: PLR0913
        cls,
        id: UUID,
        first_name: str,
        last_name: str,
        email: str,
        phone: str,
        password_hash: str | None,
        password_changed_at: datetime | None,
        password_reset_fingerprint: str | None,
        password_reset_expires_at: datetime | None,
        profile_image: str | None,
        created_at: datetime,
    ) -> Principal:
        return cls(
            id=id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            password_hash=password_hash,
            password_changed_at=password_changed_at,
            password_reset_fingerprint=password_reset_fingerprint,
            password_reset_expires_at=password_reset_expires_at,
            profile_image=profile_image,
            created_at=created_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Principal):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"Principal(id={self._id}, email={self._email})"
