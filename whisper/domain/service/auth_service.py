"""Authentication domain service.

Holds the pluggable strategies, one per credential type. Every strategy
either returns the authenticated Identity or raises an AuthenticationError
subclass whose `reason` says why.
"""

import hmac
import secrets
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

import logfire
from pydantic import SecretStr

from whisper.domain.error import ProviderDeniedError, ProviderError, ValidationError
from whisper.domain.model.identity import Identity
from whisper.domain.value import AuthProvider, OAuthProviderInfo, Username
from whisper.domain.value.common import ValueObject

from .base import Service
from .credential_service import CredentialStore


class LocalCredentials(ValueObject):
    """Username/password submitted to the local strategy."""

    username: Username
    password: SecretStr


class OAuthCallback(ValueObject):
    """Query parameters an OAuth provider sends back to the callback URL."""

    code: str | None = None
    state: str | None = None
    error: str | None = None
    error_description: str | None = None
    # State remembered by the browser that began the flow
    expected_state: str | None = None


class OAuthAuthorization(ValueObject):
    """Where to send the user agent, and the state it must come back with."""

    url: str
    state: str


class OAuthClient:
    """Generic OAuth 2.0 authorization-code client interface."""

    provider: AuthProvider

    async def initiate_authorization(self, state: str) -> str:
        """Initiate OAuth authorization flow.

        Args:
            state: State parameter for CSRF protection

        Returns:
            Authorization URL to redirect user to
        """
        raise NotImplementedError

    async def complete_authorization(self, code: str, state: str) -> OAuthProviderInfo:
        """Complete OAuth authorization flow.

        Exchanges the code for an access token, which never leaves the
        client, and fetches the verified profile.

        Args:
            code: Authorization code from OAuth callback
            state: State parameter for verification

        Returns:
            Provider user information

        Raises:
            TokenExchangeFailedError: If the code exchange fails
            ProviderError: If state is unknown or the profile is unusable
        """
        raise NotImplementedError


def _same_state(expected: str | None, received: str) -> bool:
    if expected is None:
        return False
    return hmac.compare_digest(
        expected.encode("utf-8", "surrogatepass"),
        received.encode("utf-8", "surrogatepass"),
    )


C = TypeVar("C")


class AuthStrategy(ABC, Generic[C]):
    """One credential-verification protocol."""

    name: str

    @abstractmethod
    async def authenticate(self, credentials: C) -> Identity:
        """Authenticate a credential input.

        Args:
            credentials: Strategy-specific input

        Returns:
            The authenticated identity

        Raises:
            AuthenticationError: If authentication fails
        """
        pass


class LocalStrategy(AuthStrategy[LocalCredentials]):
    """Username/password authentication against the credential store."""

    name = "local"

    def __init__(self, credential_store: CredentialStore) -> None:
        self.credential_store = credential_store

    async def authenticate(self, credentials: LocalCredentials) -> Identity:
        user = await self.credential_store.verify_local(
            credentials.username, credentials.password.get_secret_value()
        )
        return Identity.from_user(user)


class OAuthStrategy(AuthStrategy[OAuthCallback]):
    """OAuth 2.0 authorization-code authentication for one provider.

    Users created here never get a local password.
    """

    def __init__(self, client: OAuthClient, credential_store: CredentialStore) -> None:
        self.client = client
        self.credential_store = credential_store
        self.provider = client.provider
        self.name = client.provider.value

    async def begin(self) -> OAuthAuthorization:
        """Start a consent flow.

        Returns:
            Provider authorization URL and the fresh state it carries
        """
        state = secrets.token_urlsafe(32)
        url = await self.client.initiate_authorization(state)
        return OAuthAuthorization(url=url, state=state)

    async def authenticate(self, credentials: OAuthCallback) -> Identity:
        if credentials.error:
            logfire.info(
                "OAuth provider returned an error",
                provider=self.provider.value,
                error=credentials.error,
            )
            if credentials.error == "access_denied":
                raise ProviderDeniedError(f"{self.provider.value} consent was denied")
            raise ProviderError(
                f"{self.provider.value} returned error: {credentials.error}"
            )

        if not credentials.code or not credentials.state:
            raise ProviderError(
                f"{self.provider.value} callback is missing code or state"
            )
        if not _same_state(credentials.expected_state, credentials.state):
            logfire.warn(
                "OAuth state not issued to this browser", provider=self.provider.value
            )
            raise ProviderError(f"{self.provider.value} state does not match")

        info = await self.client.complete_authorization(
            credentials.code, credentials.state
        )
        if info.provider != self.provider or not info.provider_user_id:
            raise ProviderError(f"{self.provider.value} returned an unusable profile")

        user = await self.credential_store.find_or_create_by_external(
            info.provider, info.provider_user_id
        )
        return Identity.from_user(user)


class AuthService(Service):
    """Domain service for multi-strategy authentication.

    Built once per request from the process-wide OAuth client map; the map
    itself is assembled at startup from configuration.
    """

    def __init__(
        self,
        credential_store: CredentialStore,
        oauth_clients: dict[AuthProvider, OAuthClient],
    ) -> None:
        """Initialize auth service.

        Args:
            credential_store: Credential store domain service
            oauth_clients: Map of provider to OAuth client implementation
        """
        self.local = LocalStrategy(credential_store)
        self.oauth: dict[AuthProvider, OAuthStrategy] = {
            provider: OAuthStrategy(client, credential_store)
            for provider, client in oauth_clients.items()
        }

    def oauth_strategy(self, provider: AuthProvider) -> OAuthStrategy:
        """Get the strategy for an OAuth provider.

        Raises:
            ValidationError: If provider not configured
        """
        strategy = self.oauth.get(provider)
        if not strategy:
            raise ValidationError(f"Unsupported provider: {provider.value}")
        return strategy

    async def authenticate_local(self, credentials: LocalCredentials) -> Identity:
        """Run the local strategy."""
        with logfire.span("auth_service.authenticate_local"):
            return await self.local.authenticate(credentials)

    async def initiate_login(self, provider: AuthProvider) -> OAuthAuthorization:
        """Begin an OAuth consent flow.

        Returns:
            Authorization URL and the state the browser must hold on to
        """
        with logfire.span("auth_service.initiate_login", provider=provider.value):
            return await self.oauth_strategy(provider).begin()

    async def complete_login(
        self, provider: AuthProvider, callback: OAuthCallback
    ) -> Identity:
        """Run an OAuth strategy on its callback parameters."""
        with logfire.span("auth_service.complete_login", provider=provider.value):
            return await self.oauth_strategy(provider).authenticate(callback)
