from pazireshino_identity.application.services.auth_guard import (
    AuthGuard,
    GuardContext,
    password_changed_after,
)
from pazireshino_identity.application.services.credential_lifecycle_service import (
    CredentialLifecycleService,
    SignupData,
)
from pazireshino_identity.application.services.profile_service import ProfileService

__all__ = [
    "AuthGuard",
    "CredentialLifecycleService",
    "GuardContext",
    "ProfileService",
    "SignupData",
    "password_changed_after",
]
