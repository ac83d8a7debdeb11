"""Facebook OAuth 2.0 client implementation.

Profile comes from the Graph API `/me` node; the stable subject id is `id`.
The code exchange is a form POST so the app secret never appears in a URL.
"""

from whisper.adapter.oauth2 import RealOAuth2Client
from whisper.domain.error import TokenExchangeFailedError
from whisper.domain.service.auth_service import OAuthClient
from whisper.domain.value import AuthProvider, OAuthProviderInfo


class FacebookOAuthClient(OAuthClient):
    """Base class for Facebook OAuth clients.

    Provides type distinction for dependency injection.
    """

    provider = AuthProvider.FACEBOOK


class RealFacebookOAuthClient(RealOAuth2Client, FacebookOAuthClient):
    """Facebook Login OAuth 2.0 client."""

    provider = AuthProvider.FACEBOOK
    user_info_url = "https://graph.facebook.com/me"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        scope: str,
        graph_api_version: str = "v19.0",
        **kwargs,
    ) -> None:
        """Initialize Facebook OAuth client.

        Args:
            client_id: Facebook app ID
            client_secret: Facebook app secret
            redirect_uri: Callback URL registered with the app
            scope: Comma or space separated permissions
            graph_api_version: Versioned dialog and token endpoints
        """
        super().__init__(client_id, client_secret, redirect_uri, scope, **kwargs)
        self.authorize_url = f"https://www.facebook.com/{graph_api_version}/dialog/oauth"
        self.token_url = (
            f"https://graph.facebook.com/{graph_api_version}/oauth/access_token"
        )

    def user_info_params(self) -> dict[str, str]:
        return {"fields": "id,name"}

    def parse_profile(self, profile: dict) -> OAuthProviderInfo:
        return OAuthProviderInfo(
            provider=AuthProvider.FACEBOOK,
            provider_user_id=self._require_subject(profile, "id"),
            display_name=profile.get("name"),
        )


class MockFacebookOAuthClient(FacebookOAuthClient):
    """Mock Facebook OAuth client for testing.

    Returns deterministic test data without making real API calls. The code
    "invalid" simulates a rejected token exchange.
    """

    def __init__(self, provider_user_id: str = "42") -> None:
        self.provider_user_id = provider_user_id

    async def initiate_authorization(self, state: str) -> str:
        return f"https://www.facebook.com/v19.0/dialog/oauth?state={state}&mock=true"

    async def complete_authorization(self, code: str, state: str) -> OAuthProviderInfo:
        if code == "invalid":
            raise TokenExchangeFailedError("facebook token exchange failed: 400")
        return OAuthProviderInfo(
            provider=AuthProvider.FACEBOOK,
            provider_user_id=self.provider_user_id,
            display_name="Mock Facebook User",
        )
