from pazireshino_identity.domain.principal.repositories.principal_repository import (
    PrincipalRepository,
)

__all__ = ["PrincipalRepository"]
