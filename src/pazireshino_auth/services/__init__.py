"""Authentication services.

Provides password hashing, JWT token management and recovery secrets.
"""

from pazireshino_auth.services.jwt_service import JWTService
from pazireshino_auth.services.password_service import PasswordHashingService
from pazireshino_auth.services.recovery_token_service import RecoveryTokenGenerator

__all__ = [
    "JWTService",
    "PasswordHashingService",
    "RecoveryTokenGenerator",
]
