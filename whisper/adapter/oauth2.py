"""Shared OAuth 2.0 authorization-code flow over httpx.

Provider clients subclass RealOAuth2Client and supply endpoints, the token
request shape and profile parsing.
"""

import time
from urllib.parse import urlencode

import httpx
import logfire

from whisper.domain.error import ProviderError, TokenExchangeFailedError
from whisper.domain.service.auth_service import OAuthClient
from whisper.domain.value import AuthProvider, OAuthProviderInfo


class RealOAuth2Client(OAuthClient):
    """OAuth 2.0 authorization-code client.

    Pending `state` values are remembered in process memory until their
    callback arrives or they expire. With several workers, the callback must
    reach the worker that began the flow.
    """

    provider: AuthProvider
    authorize_url: str
    token_url: str
    user_info_url: str

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        scope: str,
        state_ttl_seconds: int = 600,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize OAuth client.

        Args:
            client_id: OAuth client ID
            client_secret: OAuth client secret
            redirect_uri: Callback URL registered with the provider
            scope: Space separated scopes to request
            state_ttl_seconds: How long a begun flow may wait for its callback
            timeout: HTTP timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.scope = scope
        self.state_ttl_seconds = state_ttl_seconds
        self.timeout = timeout
        self._transport = transport

        # state -> monotonic expiry
        self._pending_states: dict[str, float] = {}

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self.timeout)

    def _prune_states(self, now: float) -> None:
        expired = [s for s, expires in self._pending_states.items() if expires <= now]
        for state in expired:
            del self._pending_states[state]

    def _consume_state(self, state: str) -> bool:
        now = time.monotonic()
        expires = self._pending_states.pop(state, None)
        self._prune_states(now)
        return expires is not None and expires > now

    def authorization_params(self, state: str) -> dict[str, str]:
        """Query parameters of the consent redirect."""
        return {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": self.scope,
            "state": state,
        }

    async def initiate_authorization(self, state: str) -> str:
        """Remember the state and build the consent URL.

        Args:
            state: State parameter for CSRF protection

        Returns:
            Authorization URL to redirect user to
        """
        now = time.monotonic()
        self._prune_states(now)
        self._pending_states[state] = now + self.state_ttl_seconds

        auth_url = f"{self.authorize_url}?{urlencode(self.authorization_params(state))}"

        logfire.info(
            "OAuth authorization initiated",
            provider=self.provider.value,
            redirect_uri=self.redirect_uri,
        )
        return auth_url

    async def complete_authorization(self, code: str, state: str) -> OAuthProviderInfo:
        """Exchange the code and fetch the provider profile.

        Args:
            code: Authorization code from the callback
            state: State parameter from the callback

        Returns:
            Verified provider profile

        Raises:
            ProviderError: If state is unknown or expired, or the profile is unusable
            TokenExchangeFailedError: If the code cannot be exchanged
        """
        if not self._consume_state(state):
            logfire.warn("OAuth state unknown or expired", provider=self.provider.value)
            raise ProviderError(f"{self.provider.value} OAuth state unknown or expired")

        access_token = await self._exchange_code_for_token(code)
        profile = await self._get_user_info(access_token)
        info = self.parse_profile(profile)

        logfire.info(
            "OAuth completed",
            provider=self.provider.value,
            provider_user_id=info.provider_user_id,
        )
        return info

    async def _send_token_request(
        self, client: httpx.AsyncClient, code: str
    ) -> httpx.Response:
        """Send the code-for-token request as a form POST."""
        return await client.post(
            self.token_url,
            data={
                "code": code,
                "grant_type": "authorization_code",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uri": self.redirect_uri,
            },
            headers={"Accept": "application/json"},
        )

    async def _exchange_code_for_token(self, code: str) -> str:
        """Exchange authorization code for access token.

        Raises:
            TokenExchangeFailedError: On transport error, non-2xx or missing token
        """
        try:
            async with self._http_client() as client:
                response = await self._send_token_request(client, code)
        except httpx.HTTPError as e:
            logfire.error(
                "OAuth token exchange HTTP error",
                provider=self.provider.value,
                error_type=type(e).__name__,
            )
            raise TokenExchangeFailedError(
                f"{self.provider.value} token endpoint unreachable"
            ) from e

        if not response.is_success:
            logfire.error(
                "OAuth token exchange failed",
                provider=self.provider.value,
                status_code=response.status_code,
            )
            raise TokenExchangeFailedError(
                f"{self.provider.value} token exchange failed: {response.status_code}"
            )

        try:
            access_token = response.json()["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise TokenExchangeFailedError(
                f"{self.provider.value} token response has no access token"
            ) from e

        if not access_token:
            raise TokenExchangeFailedError(
                f"{self.provider.value} token response has no access token"
            )
        return access_token

    def user_info_params(self) -> dict[str, str]:
        return {}

    async def _get_user_info(self, access_token: str) -> dict:
        """Fetch the profile with the access token.

        Raises:
            ProviderError: On transport error, non-2xx or non-object body
        """
        try:
            async with self._http_client() as client:
                response = await client.get(
                    self.user_info_url,
                    params=self.user_info_params(),
                    headers={"Authorization": f"Bearer {access_token}"},
                )
        except httpx.HTTPError as e:
            logfire.error(
                "OAuth user info HTTP error",
                provider=self.provider.value,
                error_type=type(e).__name__,
            )
            raise ProviderError(
                f"{self.provider.value} profile endpoint unreachable"
            ) from e

        if not response.is_success:
            logfire.error(
                "OAuth user info request failed",
                provider=self.provider.value,
                status_code=response.status_code,
            )
            raise ProviderError(
                f"{self.provider.value} profile request failed: {response.status_code}"
            )

        try:
            profile = response.json()
        except ValueError as e:
            raise ProviderError(f"{self.provider.value} profile is not JSON") from e

        if not isinstance(profile, dict):
            raise ProviderError(f"{self.provider.value} profile is not an object")
        return profile

    def parse_profile(self, profile: dict) -> OAuthProviderInfo:
        """Extract the stable subject id from a profile.

        Raises:
            ProviderError: If the subject id is missing
        """
        raise NotImplementedError

    def _require_subject(self, profile: dict, key: str) -> str:
        subject = profile.get(key)
        if subject is None or str(subject) == "":
            logfire.warn(
                "OAuth profile missing subject id",
                provider=self.provider.value,
                key=key,
            )
            raise ProviderError(f"{self.provider.value} profile has no {key}")
        return str(subject)
