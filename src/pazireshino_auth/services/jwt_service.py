"""JWT token service.

Signs and verifies the compact bearer tokens handed out on signup, login,
password change and password reset.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

import jwt

from pazireshino_auth.exceptions import InvalidTokenError
from pazireshino_auth.schemas import TokenPayload


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class JWTService:
    """Service for bearer token issuance and verification.

    Tokens carry only the subject id and the ``iat``/``exp`` instants, both
    at whole-second resolution. Verification is pure: it checks encoding,
    signature and expiry and never looks the subject up.

    Examples
    --------
    >>> service = JWTService(secret_key="your-secret-key")
    >>> token = service.issue(principal_id)
    >>> payload = service.verify(token)
    >>> print(payload.subject_id)
    """

    DEFAULT_EXPIRE_DAYS = 90
    ALGORITHM = "HS256"

    def __init__(
        self,
        secret_key: str,
        expires_in_days: int = DEFAULT_EXPIRE_DAYS,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        secret_key
            Secret key for signing tokens. Must be kept secure.
        expires_in_days
            Days until an issued token expires (default 90)
        clock
            Returns the current tz-aware instant; overridable for tests
        """
        if not secret_key:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._lifetime = timedelta(days=expires_in_days)
        self._clock = clock

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    def issue(self, subject_id: UUID, lifetime: timedelta | None = None) -> str:
        """Issue a signed token for ``subject_id``.

        Parameters
        ----------
        subject_id
            The principal's unique identifier
        lifetime
            Custom lifetime (optional, defaults to the configured one)

        Returns
        -------
        The encoded JWT token string
        """
        issued_at = int(self._clock().timestamp())
        expires_at = issued_at + int((lifetime or self._lifetime).total_seconds())

        payload = {
            "sub": str(subject_id),
            "iat": issued_at,
            "exp": expires_at,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)

    def verify(self, token: str) -> TokenPayload:
        """Verify and decode a token.

        Parameters
        ----------
        token
            The JWT token string to verify

        Returns
        -------
        TokenPayload containing the decoded data

        Raises
        ------
        InvalidTokenError
            If the token is malformed, badly signed or expired
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                options={
                    "require": ["sub", "iat", "exp"],
                    # Time claims are checked below against the injected clock
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )

            decoded = TokenPayload(
                subject_id=UUID(payload["sub"]),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )

        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise InvalidTokenError(f"Malformed token payload: {e}") from e

        if decoded.is_expired(self._clock()):
            raise InvalidTokenError("Token has expired")

        return decoded
