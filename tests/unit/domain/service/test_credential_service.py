"""Unit tests for CredentialStore."""

import asyncio
from uuid import uuid4

import pytest

from whisper.domain.error import (
    AlreadyExistsError,
    BadPasswordError,
    DuplicateRecordError,
    NotFoundError,
    UserNotFoundError,
)
from whisper.domain.model import UserIdentity
from whisper.domain.repository import UserIdentityRepository
from whisper.domain.service import CredentialStore, PasswordHasher
from whisper.domain.value import AuthProvider, UserId, Username
from whisper.persistence.repository.inmemory import InMemoryUserIdentityRepository
from tests.harness import FAST_PASSWORD_SETTINGS, create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


class RacingUserIdentityRepository(InMemoryUserIdentityRepository):
    """Repository whose first provider lookup misses a row that already exists.

    Reproduces the window where a concurrent request inserts between our
    lookup and our insert.
    """

    def __init__(self, existing: UserIdentity | None = None) -> None:
        super().__init__()
        if existing is not None:
            self._users[existing.id] = existing
        self.lookups = 0

    async def find_by_provider(self, provider, provider_user_id):
        self.lookups += 1
        if self.lookups == 1:
            return None
        return await super().find_by_provider(provider, provider_user_id)


class VanishingUserIdentityRepository(InMemoryUserIdentityRepository):
    """Repository that rejects every insert and never finds the conflicting row."""

    async def find_by_provider(self, provider, provider_user_id):
        return None

    async def insert(self, user):
        raise DuplicateRecordError("User", str(user.id))


def _store(repository: UserIdentityRepository) -> CredentialStore:
    return CredentialStore(
        user_identity_repository=repository,
        password_hasher=PasswordHasher(password_settings=FAST_PASSWORD_SETTINGS),
    )


class TestCreateAndVerifyLocal:
    @pytest.mark.asyncio
    async def test_register_then_verify_returns_same_user(self, unit_env):
        store = await unit_env.get(CredentialStore)

        created = await store.create_local(Username("alice"), "pw123")
        verified = await store.verify_local(Username("alice"), "pw123")

        assert verified.id == created.id
        assert created.local_credential is not None
        assert created.external_credentials == {}

    @pytest.mark.asyncio
    async def test_password_is_not_stored_in_plaintext(self, unit_env):
        store = await unit_env.get(CredentialStore)

        created = await store.create_local(Username("alice"), "pw123")

        credential = created.local_credential
        assert "pw123" not in credential.password_hash.get_secret_value()
        assert "pw123" not in repr(created)

    @pytest.mark.asyncio
    async def test_duplicate_username_raises_already_exists(self, unit_env):
        store = await unit_env.get(CredentialStore)
        await store.create_local(Username("alice"), "pw123")

        with pytest.raises(AlreadyExistsError):
            await store.create_local(Username("alice"), "other")

    @pytest.mark.asyncio
    async def test_concurrent_registration_has_one_winner(self, unit_env):
        store = await unit_env.get(CredentialStore)
        repo = await unit_env.get(UserIdentityRepository)

        results = await asyncio.gather(
            store.create_local(Username("carol"), "pw1"),
            store.create_local(Username("carol"), "pw2"),
            return_exceptions=True,
        )

        created = [r for r in results if isinstance(r, UserIdentity)]
        failed = [r for r in results if isinstance(r, AlreadyExistsError)]
        assert len(created) == 1
        assert len(failed) == 1
        assert (await repo.find_by_username(Username("carol"))).id == created[0].id

    @pytest.mark.asyncio
    async def test_unknown_username_raises_user_not_found(self, unit_env):
        store = await unit_env.get(CredentialStore)

        with pytest.raises(UserNotFoundError):
            await store.verify_local(Username("nobody"), "pw123")

    @pytest.mark.asyncio
    async def test_wrong_password_raises_bad_password_and_leaves_record(
        self, unit_env
    ):
        store = await unit_env.get(CredentialStore)
        repo = await unit_env.get(UserIdentityRepository)
        bob = await store.create_local(Username("bob"), "right")

        with pytest.raises(BadPasswordError):
            await store.verify_local(Username("bob"), "wrong")

        assert await repo.find_by_id(bob.id) == bob

    @pytest.mark.asyncio
    async def test_oauth_only_user_cannot_log_in_locally(self, unit_env):
        store = await unit_env.get(CredentialStore)
        await store.find_or_create_by_external(AuthProvider.GOOGLE, "X")

        with pytest.raises(UserNotFoundError):
            await store.verify_local(Username("X"), "anything")


class TestFindOrCreateByExternal:
    @pytest.mark.asyncio
    async def test_sequential_calls_return_same_user(self, unit_env):
        store = await unit_env.get(CredentialStore)
        repo = await unit_env.get(UserIdentityRepository)

        first = await store.find_or_create_by_external(AuthProvider.GOOGLE, "X")
        second = await store.find_or_create_by_external(AuthProvider.GOOGLE, "X")

        assert first.id == second.id
        assert first.local_credential is None
        assert first.external_credentials == {AuthProvider.GOOGLE: "X"}
        assert len(repo._users) == 1

    @pytest.mark.asyncio
    async def test_concurrent_calls_create_one_user(self, unit_env):
        store = await unit_env.get(CredentialStore)
        repo = await unit_env.get(UserIdentityRepository)

        users = await asyncio.gather(
            *(
                store.find_or_create_by_external(AuthProvider.GOOGLE, "X")
                for _ in range(5)
            )
        )

        assert len({u.id for u in users}) == 1
        assert len(repo._users) == 1

    @pytest.mark.asyncio
    async def test_same_subject_on_different_providers_are_different_users(
        self, unit_env
    ):
        store = await unit_env.get(CredentialStore)

        google = await store.find_or_create_by_external(AuthProvider.GOOGLE, "42")
        facebook = await store.find_or_create_by_external(AuthProvider.FACEBOOK, "42")

        assert google.id != facebook.id

    @pytest.mark.asyncio
    async def test_lost_insert_race_returns_winner(self):
        winner = UserIdentity(
            id=UserId(uuid4()), external_credentials={AuthProvider.FACEBOOK: "42"}
        )
        repo = RacingUserIdentityRepository(existing=winner)
        store = _store(repo)

        result = await store.find_or_create_by_external(AuthProvider.FACEBOOK, "42")

        assert result.id == winner.id
        assert repo.lookups == 2
        assert len(repo._users) == 1

    @pytest.mark.asyncio
    async def test_conflict_without_winner_is_reraised(self):
        store = _store(VanishingUserIdentityRepository())

        with pytest.raises(DuplicateRecordError):
            await store.find_or_create_by_external(AuthProvider.GOOGLE, "X")


class TestSecrets:
    @pytest.mark.asyncio
    async def test_set_secret_then_list(self, unit_env):
        store = await unit_env.get(CredentialStore)
        alice = await store.create_local(Username("alice"), "pw123")
        await store.create_local(Username("dave"), "pw")

        await store.set_secret(alice.id, "hello")
        users = await store.list_users_with_secret()

        assert [(u.id, u.secret) for u in users] == [(alice.id, "hello")]

    @pytest.mark.asyncio
    async def test_set_secret_replaces_previous(self, unit_env):
        store = await unit_env.get(CredentialStore)
        alice = await store.create_local(Username("alice"), "pw123")

        await store.set_secret(alice.id, "first")
        await store.set_secret(alice.id, "second")

        assert (await store.find_by_id(alice.id)).secret == "second"

    @pytest.mark.asyncio
    async def test_set_secret_for_unknown_user_raises(self, unit_env):
        store = await unit_env.get(CredentialStore)

        with pytest.raises(NotFoundError):
            await store.set_secret(UserId(uuid4()), "hello")

    @pytest.mark.asyncio
    async def test_list_is_empty_without_secrets(self, unit_env):
        store = await unit_env.get(CredentialStore)
        await store.create_local(Username("alice"), "pw123")

        assert await store.list_users_with_secret() == []


class TestFindAndDelete:
    @pytest.mark.asyncio
    async def test_find_by_id_unknown_raises(self, unit_env):
        store = await unit_env.get(CredentialStore)

        with pytest.raises(NotFoundError):
            await store.find_by_id(UserId(uuid4()))

    @pytest.mark.asyncio
    async def test_delete_removes_user(self, unit_env):
        store = await unit_env.get(CredentialStore)
        user = await store.find_or_create_by_external(AuthProvider.GOOGLE, "X")

        await store.delete(user.id)

        with pytest.raises(NotFoundError):
            await store.find_by_id(user.id)
