"""Pazireshino Auth - Generic authentication primitives.

This package is independent of the platform's domain. It handles:
- Password hashing (bcrypt)
- JWT bearer token issuance and verification
- Password recovery secrets (random secret + SHA-256 fingerprint)

Architecture:
    pazireshino_auth/
    ├── services/           # Pure logic (hashing, JWT, recovery secrets)
    ├── schemas.py          # Data classes
    └── exceptions.py       # Auth exceptions

Usage:
    from pazireshino_auth import JWTService, PasswordHashingService
"""

from pazireshino_auth.exceptions import (
    AuthError,
    InvalidTokenError,
    WeakPasswordError,
)
from pazireshino_auth.schemas import RecoverySecret, TokenPayload
from pazireshino_auth.services import (
    JWTService,
    PasswordHashingService,
    RecoveryTokenGenerator,
)

__all__ = [
    # Services
    "JWTService",
    "PasswordHashingService",
    "RecoveryTokenGenerator",
    # Schemas
    "RecoverySecret",
    "TokenPayload",
    # Exceptions
    "AuthError",
    "InvalidTokenError",
    "WeakPasswordError",
]
