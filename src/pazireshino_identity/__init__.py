"""Pazireshino Identity - principals and their credential lifecycle.

Architecture:
    pazireshino_identity/
    ├── domain/            # Principal aggregate + repository contract
    ├── application/       # AuthGuard, CredentialLifecycleService, ProfileService
    └── infrastructure/    # SQLAlchemy persistence, SMTP notifier
"""
