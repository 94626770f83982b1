"""Password hashing service using bcrypt.

Provides salted, cost-parameterized password hashing and constant-time
verification. The ``*_async`` variants push the CPU-bound work onto a worker
thread so request handlers on the event loop are not starved.
"""

import asyncio
from functools import lru_cache

import bcrypt

from pazireshino_auth.exceptions import WeakPasswordError

# bcrypt ignores (and newer releases reject) input past this many bytes
BCRYPT_MAX_BYTES = 72


@lru_cache(maxsize=8)
def _dummy_hash(rounds: int) -> bytes:
    return bcrypt.hashpw(b"pazireshino-dummy-password", bcrypt.gensalt(rounds=rounds))


class PasswordHashingService:
    """Service for secure password hashing and verification.

    Uses bcrypt with a process-wide work factor.

    Examples
    --------
    >>> service = PasswordHashingService()
    >>> hash = service.hash("my_secure_password")
    >>> service.verify("my_secure_password", hash)
    True
    >>> service.verify("wrong_password", hash)
    False
    """

    DEFAULT_ROUNDS = 12

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        """Initialize the password hashing service.

        Parameters
        ----------
        rounds
            The bcrypt work factor (log2 of iterations). Default is 12,
            which keeps a single hash in the tens-of-milliseconds range
            on current hardware.
        """
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a plaintext password.

        Parameters
        ----------
        password
            The plaintext password to hash

        Returns
        -------
        The bcrypt hash as a string

        Raises
        ------
        WeakPasswordError
            If the password is empty or longer than bcrypt accepts
        """
        self.validate(password)
        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash.

        ``bcrypt.checkpw`` compares digests in constant time.

        Parameters
        ----------
        password
            The plaintext password to check
        password_hash
            The bcrypt hash to verify against

        Returns
        -------
        True if password matches, False otherwise
        """
        if not password or not password_hash:
            return False
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except (ValueError, TypeError):
            # Invalid hash format or overlong password
            return False

    async def hash_async(self, password: str) -> str:
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(self.verify, password, password_hash)

    async def verify_dummy_async(self, password: str) -> bool:
        """Spend one verification on a throwaway hash.

        Used when the login identifier is unknown so that path takes as long
        as a wrong-password attempt. Always returns False.
        """
        await asyncio.to_thread(self._verify_dummy, password or "x")
        return False

    async def warm_up_async(self) -> None:
        """Build the throwaway hash ahead of the first unknown-email login."""
        await asyncio.to_thread(_dummy_hash, self._rounds)

    def _verify_dummy(self, password: str) -> None:
        self.verify(password, _dummy_hash(self._rounds).decode("utf-8"))

    def validate(self, password: str) -> None:
        """Validate that a password can be hashed.

        Raises
        ------
        WeakPasswordError
            If password is empty or exceeds bcrypt's input limit
        """
        if not password:
            msg = "Password cannot be empty"
            raise WeakPasswordError(msg)

        if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
            msg = f"Password cannot exceed {BCRYPT_MAX_BYTES} bytes"
            raise WeakPasswordError(msg)
