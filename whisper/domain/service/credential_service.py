"""Credential store domain service."""

from datetime import datetime, timezone
from uuid import uuid4

import logfire

from whisper.domain.error import (
    AlreadyExistsError,
    BadPasswordError,
    DuplicateRecordError,
    NotFoundError,
    UserNotFoundError,
)
from whisper.domain.model.user_identity import LocalCredential, UserIdentity
from whisper.domain.repository.user_identity import UserIdentityRepository
from whisper.domain.value import AuthProvider, UserId, Username

from .base import Service
from .password_service import PasswordHasher


class CredentialStore(Service):
    """Durable user records and the credentials attached to them.

    The only component that sees password hashes. Callers outside it work
    with UserIdentity records whose credential fields are SecretStr, or with
    the credential-free Identity view.
    """

    def __init__(
        self,
        user_identity_repository: UserIdentityRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        """Initialize credential store.

        Args:
            user_identity_repository: User identity repository
            password_hasher: Password hashing service
        """
        self.user_identity_repository = user_identity_repository
        self.password_hasher = password_hasher

    async def find_by_id(self, user_id: UserId) -> UserIdentity:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User record

        Raises:
            NotFoundError: If user not found
        """
        with logfire.span("credential_store.find_by_id", user_id=str(user_id)):
            user = await self.user_identity_repository.find_by_id(user_id)
            if not user:
                logfire.warn("User not found", user_id=str(user_id))
                raise NotFoundError("User", str(user_id))
            return user

    async def find_or_create_by_external(
        self, provider: AuthProvider, provider_user_id: str
    ) -> UserIdentity:
        """Get the user linked to an external identity, creating it on first sight.

        Concurrent calls for the same pair all resolve to one user: the
        repository rejects the losing insert with DuplicateRecordError and
        the loser re-reads the winner's record.

        Args:
            provider: Authentication provider
            provider_user_id: Subject id issued by the provider

        Returns:
            The existing or newly created user
        """
        with logfire.span(
            "credential_store.find_or_create_by_external",
            provider=provider.value,
            provider_user_id=provider_user_id,
        ):
            existing = await self.user_identity_repository.find_by_provider(
                provider, provider_user_id
            )
            if existing:
                logfire.info(
                    "External identity found",
                    provider=provider.value,
                    user_id=str(existing.id),
                )
                return existing

            now = datetime.now(timezone.utc)
            user = UserIdentity(
                id=UserId(uuid4()),
                external_credentials={provider: provider_user_id},
                created_at=now,
                updated_at=now,
            )
            try:
                created = await self.user_identity_repository.insert(user)
            except DuplicateRecordError:
                winner = await self.user_identity_repository.find_by_provider(
                    provider, provider_user_id
                )
                if winner is None:
                    # The conflicting row vanished between insert and re-read
                    raise
                logfire.info(
                    "External identity created concurrently, using existing",
                    provider=provider.value,
                    user_id=str(winner.id),
                )
                return winner

            logfire.info(
                "External identity created",
                provider=provider.value,
                user_id=str(created.id),
            )
            return created

    async def create_local(self, username: Username, password: str) -> UserIdentity:
        """Register a local user.

        Args:
            username: Username or email
            password: Plaintext password, hashed before it is persisted

        Returns:
            The new user

        Raises:
            AlreadyExistsError: If the username is taken
        """
        with logfire.span("credential_store.create_local", username=username.root):
            if await self.user_identity_repository.find_by_username(username):
                logfire.warn("Username already registered", username=username.root)
                raise AlreadyExistsError(f"Username already registered: {username}")

            hashed = await self.password_hasher.hash_async(password)
            now = datetime.now(timezone.utc)
            user = UserIdentity(
                id=UserId(uuid4()),
                local_credential=LocalCredential(
                    username=username,
                    password_hash=hashed.hash,
                    password_salt=hashed.salt,
                ),
                created_at=now,
                updated_at=now,
            )
            try:
                created = await self.user_identity_repository.insert(user)
            except DuplicateRecordError as e:
                # Lost a race with a concurrent registration
                raise AlreadyExistsError(
                    f"Username already registered: {username}"
                ) from e

            logfire.info(
                "Local user registered", username=username.root, user_id=str(created.id)
            )
            return created

    async def verify_local(self, username: Username, password: str) -> UserIdentity:
        """Check a local username/password pair. Never modifies the record.

        Args:
            username: Username or email
            password: Plaintext password

        Returns:
            The matching user

        Raises:
            UserNotFoundError: If no local user has this username
            BadPasswordError: If the password does not match
        """
        with logfire.span("credential_store.verify_local", username=username.root):
            user = await self.user_identity_repository.find_by_username(username)
            if user is None or user.local_credential is None:
                logfire.info("Local login for unknown user", username=username.root)
                raise UserNotFoundError()

            credential = user.local_credential
            ok = await self.password_hasher.verify_async(
                password,
                credential.password_hash.get_secret_value(),
                credential.password_salt.get_secret_value(),
            )
            if not ok:
                logfire.info("Local login with bad password", user_id=str(user.id))
                raise BadPasswordError()

            logfire.info("Local credentials verified", user_id=str(user.id))
            return user

    async def set_secret(self, user_id: UserId, secret: str) -> None:
        """Store the user's secret text, replacing any previous one.

        Args:
            user_id: User ID
            secret: Secret text

        Raises:
            NotFoundError: If user not found
        """
        with logfire.span("credential_store.set_secret", user_id=str(user_id)):
            updated = await self.user_identity_repository.set_secret(user_id, secret)
            if not updated:
                logfire.warn("Cannot set secret, user not found", user_id=str(user_id))
                raise NotFoundError("User", str(user_id))
            logfire.info("Secret submitted", user_id=str(user_id))

    async def list_users_with_secret(self) -> list[UserIdentity]:
        """Get every user that has submitted a secret.

        Returns:
            Users with a secret (may be empty)
        """
        with logfire.span("credential_store.list_users_with_secret"):
            users = await self.user_identity_repository.find_all_with_secret()
            logfire.info("Users with secret retrieved", count=len(users))
            return users

    async def delete(self, user_id: UserId) -> None:
        """Delete a user and all of its credentials.

        Sessions still pointing at the user become anonymous on their next
        request.

        Args:
            user_id: User ID
        """
        with logfire.span("credential_store.delete", user_id=str(user_id)):
            await self.user_identity_repository.delete(user_id)
            logfire.info("User deleted", user_id=str(user_id))
