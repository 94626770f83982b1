# ruff: noqa: E501 - Long import paths in __init__.py re-exports
"""SQLAlchemy repository implementations for identity management."""

from pazireshino_identity.infrastructure.persistence.sqlalchemy.repositories.principal_repository import (
    PrincipalRepositorySQLAlchemy,
)

__all__ = [
    "PrincipalRepositorySQLAlchemy",
]
