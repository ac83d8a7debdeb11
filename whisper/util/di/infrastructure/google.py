"""Google infrastructure providers."""

from dishka import Scope, provide

from whisper.adapter.google.client import GoogleOAuthClient, RealGoogleOAuthClient
from whisper.config import Settings
from whisper.util.di.base import ProviderBase


class GoogleProvider(ProviderBase):
    """Google component base."""

    __mock_component__ = "google"


class ProdGoogleProvider(GoogleProvider):
    """Production Google provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_google_oauth_client(self, settings: Settings) -> GoogleOAuthClient:
        """Provide Google OAuth client.

        Returns:
            Google OAuth 2.0 client

        Raises:
            ConfigurationError: If Google OAuth credentials are not configured
        """
        google = settings.auth.google
        client_id = settings.require_credential(
            google.client_id, "Google OAuth client ID"
        )
        client_secret = settings.require_credential(
            google.client_secret, "Google OAuth client secret"
        )

        return RealGoogleOAuthClient(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=settings.auth.google_callback_url,
            scope=google.scope,
            state_ttl_seconds=settings.auth.oauth_state_ttl_seconds,
        )
