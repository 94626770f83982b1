"""Password recovery secret generation."""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable

from pazireshino_auth.schemas import RecoverySecret


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class RecoveryTokenGenerator:
    """Produces one-time password recovery secrets.

    The raw secret is 32 random bytes, URL-safe encoded. Its fingerprint is a
    SHA-256 hex digest, which is what gets stored and later matched.
    """

    SECRET_BYTES = 32
    DEFAULT_EXPIRE_MINUTES = 10

    def __init__(
        self,
        expire_minutes: int = DEFAULT_EXPIRE_MINUTES,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._lifetime = timedelta(minutes=expire_minutes)
        self._clock = clock

    def generate(self) -> RecoverySecret:
        raw = secrets.token_urlsafe(self.SECRET_BYTES)
        return RecoverySecret(
            raw=raw,
            fingerprint=self.fingerprint(raw),
            expires_at=self._clock() + self._lifetime,
        )

    @staticmethod
    def fingerprint(raw_secret: str) -> str:
        return hashlib.sha256(raw_secret.encode()).hexdigest()
