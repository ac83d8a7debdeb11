"""In-memory user identity repository for testing."""

import asyncio
from datetime import datetime, timezone
from typing import Optional

from whisper.domain.error import DuplicateRecordError
from whisper.domain.model.user_identity import UserIdentity
from whisper.domain.repository.user_identity import UserIdentityRepository
from whisper.domain.value import AuthProvider, UserId, Username


class InMemoryUserIdentityRepository(UserIdentityRepository):
    """In-memory implementation of UserIdentityRepository for testing.

    Uniqueness checks and the write happen under one lock, so concurrent
    inserts for the same username or provider identity see exactly one
    winner.
    """

    def __init__(self) -> None:
        self._users: dict[UserId, UserIdentity] = {}
        self._lock = asyncio.Lock()

    async def find_by_id(self, user_id: UserId) -> Optional[UserIdentity]:
        """Find a user by ID."""
        return self._users.get(user_id)

    async def find_by_username(self, username: Username) -> Optional[UserIdentity]:
        """Find a locally registered user by username."""
        for user in self._users.values():
            if user.username == username:
                return user
        return None

    async def find_by_provider(
        self, provider: AuthProvider, provider_user_id: str
    ) -> Optional[UserIdentity]:
        """Find a user by external provider identity."""
        for user in self._users.values():
            if user.external_credentials.get(provider) == provider_user_id:
                return user
        return None

    async def insert(self, user: UserIdentity) -> UserIdentity:
        """Insert a user, rejecting duplicate usernames and provider identities."""
        async with self._lock:
            if user.id in self._users:
                raise DuplicateRecordError("User", str(user.id))
            if user.username is not None and await self.find_by_username(
                user.username
            ):
                raise DuplicateRecordError("User", user.username.root)
            for provider, provider_user_id in user.external_credentials.items():
                if await self.find_by_provider(provider, provider_user_id):
                    raise DuplicateRecordError(
                        "User", f"{provider.value}:{provider_user_id}"
                    )
            self._users[user.id] = user
            return user

    async def set_secret(self, user_id: UserId, secret: str) -> bool:
        """Set a user's secret text."""
        async with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return False
            self._users[user_id] = user.model_copy(
                update={"secret": secret, "updated_at": datetime.now(timezone.utc)}
            )
            return True

    async def find_all_with_secret(self) -> list[UserIdentity]:
        """Get all users with a secret, oldest first."""
        users = [user for user in self._users.values() if user.has_secret]
        return sorted(users, key=lambda u: u.created_at)

    async def delete(self, user_id: UserId) -> None:
        """Delete a user."""
        async with self._lock:
            self._users.pop(user_id, None)
