"""Google OAuth 2.0 client implementation.

Uses the OpenID Connect userinfo endpoint; the stable subject id is `sub`.
"""

from whisper.adapter.oauth2 import RealOAuth2Client
from whisper.domain.error import TokenExchangeFailedError
from whisper.domain.service.auth_service import OAuthClient
from whisper.domain.value import AuthProvider, OAuthProviderInfo


class GoogleOAuthClient(OAuthClient):
    """Base class for Google OAuth clients.

    Provides type distinction for dependency injection.
    """

    provider = AuthProvider.GOOGLE


class RealGoogleOAuthClient(RealOAuth2Client, GoogleOAuthClient):
    """Google OAuth 2.0 authorization-code client."""

    provider = AuthProvider.GOOGLE
    authorize_url = "https://accounts.google.com/o/oauth2/v2/auth"
    token_url = "https://oauth2.googleapis.com/token"
    user_info_url = "https://openidconnect.googleapis.com/v1/userinfo"

    def parse_profile(self, profile: dict) -> OAuthProviderInfo:
        return OAuthProviderInfo(
            provider=AuthProvider.GOOGLE,
            provider_user_id=self._require_subject(profile, "sub"),
            display_name=profile.get("name"),
        )


class MockGoogleOAuthClient(GoogleOAuthClient):
    """Mock Google OAuth client for testing.

    Returns deterministic test data without making real API calls. The code
    "invalid" simulates a rejected token exchange.
    """

    def __init__(self, provider_user_id: str = "mockgoogle123") -> None:
        self.provider_user_id = provider_user_id

    async def initiate_authorization(self, state: str) -> str:
        return f"https://accounts.google.com/o/oauth2/v2/auth?state={state}&mock=true"

    async def complete_authorization(self, code: str, state: str) -> OAuthProviderInfo:
        if code == "invalid":
            raise TokenExchangeFailedError("google token exchange failed: 400")
        return OAuthProviderInfo(
            provider=AuthProvider.GOOGLE,
            provider_user_id=self.provider_user_id,
            display_name="Mock Google User",
        )
