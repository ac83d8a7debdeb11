"""Unit tests for local login and registration use cases."""

import pytest

from whisper.application.usecase.auth import (
    GetCurrentUserUseCase,
    LocalLoginUseCase,
    RegisterUseCase,
)
from whisper.application.usecase.auth.get_current_user import GetCurrentUserRequest
from whisper.application.usecase.auth.login import LocalLoginRequest
from whisper.application.usecase.auth.register import RegisterRequest
from whisper.domain.error import (
    AlreadyExistsError,
    BadPasswordError,
    UserNotFoundError,
    ValidationError,
)
from whisper.domain.repository import UserIdentityRepository
from whisper.domain.service import SessionService
from whisper.domain.value import Username
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_logs_user_in(self, unit_env):
        register = await unit_env.get(RegisterUseCase)
        current_user = await unit_env.get(GetCurrentUserUseCase)

        result = await register.execute(
            RegisterRequest(username="alice", password="pw123")
        )
        me = await current_user.execute(
            GetCurrentUserRequest(session_token=result.session_token)
        )

        assert me.authenticated
        assert me.user.user_id == result.user_id
        assert me.user.username == "alice"
        assert me.user.providers == []

    @pytest.mark.asyncio
    async def test_register_twice_raises_already_exists(self, unit_env):
        register = await unit_env.get(RegisterUseCase)
        await register.execute(RegisterRequest(username="alice", password="pw123"))

        with pytest.raises(AlreadyExistsError):
            await register.execute(RegisterRequest(username="alice", password="x"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("username, password", [("   ", "pw"), ("alice", "")])
    async def test_register_rejects_blank_input(self, unit_env, username, password):
        register = await unit_env.get(RegisterUseCase)

        with pytest.raises(ValidationError):
            await register.execute(
                RegisterRequest(username=username, password=password)
            )

    @pytest.mark.asyncio
    async def test_register_replaces_previous_session(self, unit_env):
        register = await unit_env.get(RegisterUseCase)
        sessions = await unit_env.get(SessionService)
        first = await register.execute(RegisterRequest(username="a", password="pw"))

        second = await register.execute(
            RegisterRequest(
                username="b", password="pw", session_token=first.session_token
            )
        )

        assert await sessions.load(first.session_token) is None
        assert await sessions.load(second.session_token) is not None


class TestLocalLogin:
    @pytest.mark.asyncio
    async def test_register_then_login_same_user(self, unit_env):
        register = await unit_env.get(RegisterUseCase)
        login = await unit_env.get(LocalLoginUseCase)
        registered = await register.execute(
            RegisterRequest(username="alice", password="pw123")
        )

        result = await login.execute(
            LocalLoginRequest(username="alice", password="pw123")
        )

        assert result.user_id == registered.user_id
        assert result.session_token != registered.session_token

    @pytest.mark.asyncio
    async def test_wrong_password_leaves_record_unchanged(self, unit_env):
        register = await unit_env.get(RegisterUseCase)
        login = await unit_env.get(LocalLoginUseCase)
        repo = await unit_env.get(UserIdentityRepository)
        await register.execute(RegisterRequest(username="bob", password="right"))
        before = await repo.find_by_username(Username("bob"))

        with pytest.raises(BadPasswordError):
            await login.execute(LocalLoginRequest(username="bob", password="wrong"))

        assert await repo.find_by_username(Username("bob")) == before

    @pytest.mark.asyncio
    async def test_failed_login_keeps_existing_session(self, unit_env):
        register = await unit_env.get(RegisterUseCase)
        login = await unit_env.get(LocalLoginUseCase)
        sessions = await unit_env.get(SessionService)
        registered = await register.execute(
            RegisterRequest(username="bob", password="right")
        )

        with pytest.raises(BadPasswordError):
            await login.execute(
                LocalLoginRequest(
                    username="bob",
                    password="wrong",
                    session_token=registered.session_token,
                )
            )

        assert await sessions.current_identity(registered.session_token) is not None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("username", ["ghost", "   "])
    async def test_unknown_user(self, unit_env, username):
        login = await unit_env.get(LocalLoginUseCase)

        with pytest.raises(UserNotFoundError):
            await login.execute(LocalLoginRequest(username=username, password="pw"))
