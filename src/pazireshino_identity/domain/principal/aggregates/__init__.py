from pazireshino_identity.domain.principal.aggregates.principal import Principal

__all__ = ["Principal"]
