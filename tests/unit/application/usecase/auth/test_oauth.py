"""Unit tests for OAuth use cases."""

import asyncio

import pytest

from whisper.application.usecase.auth import (
    BeginOAuthUseCase,
    CompleteOAuthUseCase,
    GetCurrentUserUseCase,
)
from whisper.application.usecase.auth.get_current_user import GetCurrentUserRequest
from whisper.application.usecase.auth.oauth import (
    BeginOAuthRequest,
    CompleteOAuthRequest,
)
from whisper.domain.error import (
    ProviderDeniedError,
    ProviderError,
    TokenExchangeFailedError,
)
from whisper.domain.repository import UserIdentityRepository
from whisper.domain.value import AuthProvider
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestBeginOAuth:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "provider, host",
        [
            (AuthProvider.GOOGLE, "https://accounts.google.com/"),
            (AuthProvider.FACEBOOK, "https://www.facebook.com/"),
        ],
    )
    async def test_returns_provider_consent_url(self, unit_env, provider, host):
        begin = await unit_env.get(BeginOAuthUseCase)

        result = await begin.execute(BeginOAuthRequest(provider=provider))

        assert result.authorization_url.startswith(host)
        assert f"state={result.state}" in result.authorization_url


class TestCompleteOAuth:
    @pytest.mark.asyncio
    async def test_first_login_creates_user_without_password(self, unit_env):
        complete = await unit_env.get(CompleteOAuthUseCase)
        repo = await unit_env.get(UserIdentityRepository)

        result = await complete.execute(
            CompleteOAuthRequest(
                provider=AuthProvider.GOOGLE, code="c", state="s", expected_state="s"
            )
        )

        user = await repo.find_by_provider(AuthProvider.GOOGLE, "mockgoogle123")
        assert str(user.id) == result.user_id
        assert user.local_credential is None

    @pytest.mark.asyncio
    async def test_concurrent_facebook_callbacks_share_one_user(self, unit_env):
        complete = await unit_env.get(CompleteOAuthUseCase)
        current_user = await unit_env.get(GetCurrentUserUseCase)
        repo = await unit_env.get(UserIdentityRepository)

        results = await asyncio.gather(
            complete.execute(
                CompleteOAuthRequest(
                    provider=AuthProvider.FACEBOOK,
                    code="a",
                    state="1",
                    expected_state="1",
                )
            ),
            complete.execute(
                CompleteOAuthRequest(
                    provider=AuthProvider.FACEBOOK,
                    code="b",
                    state="2",
                    expected_state="2",
                )
            ),
        )

        assert results[0].user_id == results[1].user_id
        assert results[0].session_token != results[1].session_token
        assert len(repo._users) == 1
        for result in results:
            me = await current_user.execute(
                GetCurrentUserRequest(session_token=result.session_token)
            )
            assert me.authenticated
            assert me.user.providers == [AuthProvider.FACEBOOK]

    @pytest.mark.asyncio
    async def test_denied_consent(self, unit_env):
        complete = await unit_env.get(CompleteOAuthUseCase)

        with pytest.raises(ProviderDeniedError):
            await complete.execute(
                CompleteOAuthRequest(
                    provider=AuthProvider.FACEBOOK, error="access_denied"
                )
            )

    @pytest.mark.asyncio
    async def test_failed_exchange_creates_nothing(self, unit_env):
        complete = await unit_env.get(CompleteOAuthUseCase)
        repo = await unit_env.get(UserIdentityRepository)

        with pytest.raises(TokenExchangeFailedError):
            await complete.execute(
                CompleteOAuthRequest(
                    provider=AuthProvider.GOOGLE,
                    code="invalid",
                    state="s",
                    expected_state="s",
                )
            )

        assert repo._users == {}

    @pytest.mark.asyncio
    async def test_state_from_another_browser_creates_nothing(self, unit_env):
        complete = await unit_env.get(CompleteOAuthUseCase)
        repo = await unit_env.get(UserIdentityRepository)

        with pytest.raises(ProviderError):
            await complete.execute(
                CompleteOAuthRequest(
                    provider=AuthProvider.GOOGLE,
                    code="c",
                    state="attacker-state",
                    expected_state="victim-state",
                )
            )

        assert repo._users == {}
