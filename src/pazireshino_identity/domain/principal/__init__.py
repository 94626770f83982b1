"""Principal domain - the authenticable identity and its store contract."""

from pazireshino_identity.domain.principal.aggregates import Principal
from pazireshino_identity.domain.principal.exceptions import (
    PrincipalAlreadyExistsError,
)
from pazireshino_identity.domain.principal.repositories import PrincipalRepository

__all__ = [
    "Principal",
    "PrincipalAlreadyExistsError",
    "PrincipalRepository",
]
