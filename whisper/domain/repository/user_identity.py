"""User identity repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from whisper.domain.model.user_identity import UserIdentity
from whisper.domain.value import AuthProvider, UserId, Username


class UserIdentityRepository(ABC):
    """Repository for UserIdentity records.

    Implementations must enforce two uniqueness rules at insert time and
    report violations as DuplicateRecordError:
    - a local username belongs to at most one user
    - a (provider, provider_user_id) pair belongs to at most one user

    Implementations raise StoreUnavailableError when the backing store
    cannot be reached.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[UserIdentity]:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_username(self, username: Username) -> Optional[UserIdentity]:
        """Find a locally registered user by username.

        Args:
            username: Local username or email

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_provider(
        self, provider: AuthProvider, provider_user_id: str
    ) -> Optional[UserIdentity]:
        """Find a user by an external provider identity.

        Args:
            provider: The authentication provider
            provider_user_id: The user's subject id on that provider

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def insert(self, user: UserIdentity) -> UserIdentity:
        """Insert a new user together with its credentials.

        The insert is all-or-nothing: on a uniqueness conflict nothing is
        written.

        Args:
            user: The user to insert

        Returns:
            The inserted user

        Raises:
            DuplicateRecordError: If the username or an external identity
                is already taken
        """
        pass

    @abstractmethod
    async def set_secret(self, user_id: UserId, secret: str) -> bool:
        """Set a user's secret text.

        Args:
            user_id: The user to update
            secret: The new secret text

        Returns:
            True if the user exists and was updated, False otherwise
        """
        pass

    @abstractmethod
    async def find_all_with_secret(self) -> list[UserIdentity]:
        """Get all users that have submitted a secret, oldest first.

        Returns:
            List of users (may be empty)
        """
        pass

    @abstractmethod
    async def delete(self, user_id: UserId) -> None:
        """Delete a user and its credentials.

        Args:
            user_id: The user to delete
        """
        pass
