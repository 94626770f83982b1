"""SQLAlchemy implementation for pazireshino_identity persistence.

Provides:
- IdentityBase: Declarative base for identity models
- PrincipalModel: SQLAlchemy model for principals
- PrincipalRepositorySQLAlchemy: Repository implementation for principals
"""

from pazireshino_identity.infrastructure.persistence.sqlalchemy.base import (
    IdentityBase,
)
from pazireshino_identity.infrastructure.persistence.sqlalchemy.models import (
    PrincipalModel,
)
from pazireshino_identity.infrastructure.persistence.sqlalchemy.repositories import (
    PrincipalRepositorySQLAlchemy,
)

__all__ = [
    "IdentityBase",
    "PrincipalModel",
    "PrincipalRepositorySQLAlchemy",
]
