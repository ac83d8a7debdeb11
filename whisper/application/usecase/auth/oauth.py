"""OAuth login use cases."""

import logfire
from pydantic import BaseModel

from whisper.application.usecase.auth.login import AuthenticatedResponse
from whisper.application.usecase.base import BaseUseCase
from whisper.domain.service import AuthService, OAuthCallback, SessionService
from whisper.domain.value import AuthProvider


class BeginOAuthRequest(BaseModel):
    """Begin OAuth request."""

    provider: AuthProvider


class BeginOAuthResponse(BaseModel):
    """Where to send the user agent for consent.

    `state` must be kept by the browser (signed cookie) and handed back with
    the callback.
    """

    authorization_url: str
    state: str


class BeginOAuthUseCase(BaseUseCase):
    """Use case for starting an OAuth consent flow."""

    def __init__(self, auth_service: AuthService) -> None:
        self.auth_service = auth_service

    async def execute(self, request: BeginOAuthRequest) -> BeginOAuthResponse:
        """Build the provider consent URL.

        Raises:
            ValidationError: If provider not configured
        """
        authorization = await self.auth_service.initiate_login(request.provider)
        return BeginOAuthResponse(
            authorization_url=authorization.url, state=authorization.state
        )


class CompleteOAuthRequest(BaseModel):
    """OAuth callback request.

    These parameters come from the OAuth provider in the callback URL, except
    expected_state and session_token, which come from the browser's cookies.
    """

    provider: AuthProvider
    code: str | None = None
    state: str | None = None
    error: str | None = None
    error_description: str | None = None
    expected_state: str | None = None
    session_token: str | None = None


class CompleteOAuthUseCase(BaseUseCase):
    """Use case for finishing an OAuth login."""

    def __init__(
        self, auth_service: AuthService, session_service: SessionService
    ) -> None:
        """Initialize OAuth completion use case.

        Args:
            auth_service: Authentication domain service (handles all providers)
            session_service: Session domain service
        """
        self.auth_service = auth_service
        self.session_service = session_service

    async def execute(self, request: CompleteOAuthRequest) -> AuthenticatedResponse:
        """Run the provider's strategy and bind a fresh session.

        The first sign-in with a provider identity creates the user.

        Args:
            request: Callback parameters

        Returns:
            New session token and user id

        Raises:
            ProviderDeniedError: If the user declined consent
            ProviderError: If the provider misbehaved, or the state was not
                issued to this browser
            TokenExchangeFailedError: If the code could not be exchanged
        """
        callback = OAuthCallback(
            code=request.code,
            state=request.state,
            error=request.error,
            error_description=request.error_description,
            expected_state=request.expected_state,
        )
        identity = await self.auth_service.complete_login(request.provider, callback)
        session = await self.session_service.login(
            identity, previous_token=request.session_token
        )

        logfire.info(
            "OAuth login succeeded",
            provider=request.provider.value,
            user_id=str(identity.id),
        )
        return AuthenticatedResponse(
            session_token=session.token, user_id=str(identity.id)
        )
