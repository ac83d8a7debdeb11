"""Domain services for Whisper."""

from .auth_service import (
    AuthService,
    AuthStrategy,
    LocalCredentials,
    LocalStrategy,
    OAuthAuthorization,
    OAuthCallback,
    OAuthClient,
    OAuthStrategy,
)
from .credential_service import CredentialStore
from .password_service import PasswordHasher
from .session_service import SessionSerializer, SessionService

__all__ = [
    "AuthService",
    "AuthStrategy",
    "CredentialStore",
    "LocalCredentials",
    "LocalStrategy",
    "OAuthAuthorization",
    "OAuthCallback",
    "OAuthClient",
    "OAuthStrategy",
    "PasswordHasher",
    "SessionSerializer",
    "SessionService",
]
