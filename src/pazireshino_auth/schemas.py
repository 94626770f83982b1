"""Auth schemas and data structures.

These are simple data classes used for transferring auth data between
components.
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class TokenPayload:
    """Decoded bearer token payload.

    Attributes
    ----------
    subject_id
        The unique identifier of the principal the token was issued to
    issued_at
        Issuance instant, whole-second resolution
    expires_at
        Expiration instant, whole-second resolution
    """

    subject_id: UUID
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Check if the token has expired at ``now``."""
        return now >= self.expires_at


@dataclass(frozen=True)
class RecoverySecret:
    """A freshly generated password recovery capability.

    ``raw`` is handed to the principal out of band exactly once; only
    ``fingerprint`` and ``expires_at`` are ever stored.
    """

    raw: str = field(repr=False)
    fingerprint: str
    expires_at: datetime
