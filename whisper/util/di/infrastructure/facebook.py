"""Facebook infrastructure providers."""

from dishka import Scope, provide

from whisper.adapter.facebook.client import (
    FacebookOAuthClient,
    RealFacebookOAuthClient,
)
from whisper.config import Settings
from whisper.util.di.base import ProviderBase


class FacebookProvider(ProviderBase):
    """Facebook component base."""

    __mock_component__ = "facebook"


class ProdFacebookProvider(FacebookProvider):
    """Production Facebook provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_facebook_oauth_client(self, settings: Settings) -> FacebookOAuthClient:
        """Provide Facebook OAuth client.

        Raises:
            ConfigurationError: If Facebook app credentials are not configured
        """
        facebook = settings.auth.facebook
        client_id = settings.require_credential(
            facebook.client_id, "Facebook app ID"
        )
        client_secret = settings.require_credential(
            facebook.client_secret, "Facebook app secret"
        )

        return RealFacebookOAuthClient(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=settings.auth.facebook_callback_url,
            scope=facebook.scope,
            graph_api_version=facebook.graph_api_version,
            state_ttl_seconds=settings.auth.oauth_state_ttl_seconds,
        )
