"""Domain layer DI providers."""

from dishka import Scope, provide

from whisper.config import PasswordSettings, SessionSettings
from whisper.domain.repository import SessionRepository, UserIdentityRepository
from whisper.domain.service import (
    AuthService,
    CredentialStore,
    OAuthClient,
    PasswordHasher,
    SessionSerializer,
    SessionService,
)
from whisper.domain.value import AuthProvider
from whisper.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    The password hasher holds no state besides its cost parameters and is
    shared process-wide.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_password_hasher(self, password_settings: PasswordSettings) -> PasswordHasher:
        """Provide password hashing service."""
        return PasswordHasher(password_settings=password_settings)

    @provide
    def get_credential_store(
        self,
        user_identity_repository: UserIdentityRepository,
        password_hasher: PasswordHasher,
    ) -> CredentialStore:
        """Provide credential store domain service."""
        return CredentialStore(
            user_identity_repository=user_identity_repository,
            password_hasher=password_hasher,
        )

    @provide
    def get_auth_service(
        self,
        credential_store: CredentialStore,
        oauth_clients: dict[AuthProvider, OAuthClient],
    ) -> AuthService:
        """Provide multi-strategy authentication domain service.

        Args:
            credential_store: Credential store domain service
            oauth_clients: Dictionary mapping providers to their OAuth clients

        Returns:
            AuthService configured with the local strategy and all OAuth clients
        """
        return AuthService(
            credential_store=credential_store, oauth_clients=oauth_clients
        )

    @provide
    def get_session_serializer(
        self, credential_store: CredentialStore
    ) -> SessionSerializer:
        """Provide session serializer."""
        return SessionSerializer(credential_store=credential_store)

    @provide
    def get_session_service(
        self,
        session_repository: SessionRepository,
        serializer: SessionSerializer,
        session_settings: SessionSettings,
    ) -> SessionService:
        """Provide session domain service."""
        return SessionService(
            session_repository=session_repository,
            serializer=serializer,
            session_settings=session_settings,
        )
