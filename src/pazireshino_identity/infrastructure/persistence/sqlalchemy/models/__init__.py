# ruff: noqa: E501 - Long import paths in __init__.py re-exports
"""SQLAlchemy models for identity management."""

from pazireshino_identity.infrastructure.persistence.sqlalchemy.models.principal_model import (
    PrincipalModel,
)

__all__ = [
    "PrincipalModel",
]
