"""Application layer DI providers."""

from dishka import Scope, provide

from whisper.application.usecase.auth import (
    BeginOAuthUseCase,
    CompleteOAuthUseCase,
    GetCurrentUserUseCase,
    LocalLoginUseCase,
    LogoutUseCase,
    RegisterUseCase,
)
from whisper.application.usecase.secret import ListSecretsUseCase, SubmitSecretUseCase
from whisper.domain.service import AuthService, CredentialStore, SessionService
from whisper.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_local_login_use_case(
        self, auth_service: AuthService, session_service: SessionService
    ) -> LocalLoginUseCase:
        """Provide local login use case."""
        return LocalLoginUseCase(
            auth_service=auth_service, session_service=session_service
        )

    @provide(scope=Scope.REQUEST)
    def get_register_use_case(
        self, credential_store: CredentialStore, session_service: SessionService
    ) -> RegisterUseCase:
        """Provide registration use case."""
        return RegisterUseCase(
            credential_store=credential_store, session_service=session_service
        )

    @provide(scope=Scope.REQUEST)
    def get_begin_oauth_use_case(self, auth_service: AuthService) -> BeginOAuthUseCase:
        """Provide begin OAuth use case."""
        return BeginOAuthUseCase(auth_service=auth_service)

    @provide(scope=Scope.REQUEST)
    def get_complete_oauth_use_case(
        self, auth_service: AuthService, session_service: SessionService
    ) -> CompleteOAuthUseCase:
        """Provide complete OAuth use case."""
        return CompleteOAuthUseCase(
            auth_service=auth_service, session_service=session_service
        )

    @provide(scope=Scope.REQUEST)
    def get_current_user_use_case(
        self, session_service: SessionService
    ) -> GetCurrentUserUseCase:
        """Provide get current user use case."""
        return GetCurrentUserUseCase(session_service=session_service)

    @provide(scope=Scope.REQUEST)
    def get_logout_use_case(self, session_service: SessionService) -> LogoutUseCase:
        """Provide logout use case."""
        return LogoutUseCase(session_service=session_service)

    # Secret use cases
    @provide(scope=Scope.REQUEST)
    def get_submit_secret_use_case(
        self, session_service: SessionService, credential_store: CredentialStore
    ) -> SubmitSecretUseCase:
        """Provide submit secret use case."""
        return SubmitSecretUseCase(
            session_service=session_service, credential_store=credential_store
        )

    @provide(scope=Scope.REQUEST)
    def get_list_secrets_use_case(
        self, session_service: SessionService, credential_store: CredentialStore
    ) -> ListSecretsUseCase:
        """Provide list secrets use case."""
        return ListSecretsUseCase(
            session_service=session_service, credential_store=credential_store
        )
