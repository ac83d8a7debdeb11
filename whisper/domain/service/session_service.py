"""Session domain services.

SessionSerializer reduces an identity to the principal id stored in a
session and rebuilds it on later requests. SessionService owns the
server-side session records.

Authentication state of a session:

    Anonymous --(strategy success)--> Authenticated --(logout)--> Anonymous
    Authenticated --(user record deleted)--> Anonymous
"""

import secrets
from datetime import datetime, timedelta, timezone

import logfire

from whisper.config import SessionSettings
from whisper.domain.error import NotFoundError
from whisper.domain.model.identity import Identity
from whisper.domain.model.session import Session
from whisper.domain.repository.session import SessionRepository
from whisper.domain.value import UserId

from .base import Service
from .credential_service import CredentialStore


class SessionSerializer(Service):
    """Converts between identities and session principal ids."""

    def __init__(self, credential_store: CredentialStore) -> None:
        """Initialize session serializer.

        Args:
            credential_store: Credential store domain service
        """
        self.credential_store = credential_store

    def serialize(self, identity: Identity) -> UserId:
        """Reduce an identity to the only value a session may hold."""
        return identity.id

    async def deserialize(self, principal_id: UserId) -> Identity | None:
        """Rebuild the identity a session points at.

        Args:
            principal_id: User id stored in the session

        Returns:
            The identity, or None if the user record no longer exists
        """
        try:
            user = await self.credential_store.find_by_id(principal_id)
        except NotFoundError:
            logfire.info(
                "Session principal no longer exists, treating as anonymous",
                user_id=str(principal_id),
            )
            return None
        return Identity.from_user(user)


class SessionService(Service):
    """Server-side session lifecycle."""

    def __init__(
        self,
        session_repository: SessionRepository,
        serializer: SessionSerializer,
        session_settings: SessionSettings,
    ) -> None:
        """Initialize session service.

        Args:
            session_repository: Session store
            serializer: Session serializer
            session_settings: Session configuration
        """
        self.session_repository = session_repository
        self.serializer = serializer
        self.settings = session_settings

    async def load(self, token: str | None) -> Session | None:
        """Load a live session by token.

        Expired sessions are deleted and reported as missing.

        Args:
            token: Session token from the client cookie

        Returns:
            The session, or None if missing or expired
        """
        if not token:
            return None

        session = await self.session_repository.find_by_token(token)
        if session is None:
            return None

        if session.is_expired():
            logfire.info("Session expired")
            await self.session_repository.delete(token)
            return None

        return session

    async def login(
        self, identity: Identity, previous_token: str | None = None
    ) -> Session:
        """Bind an identity to a freshly minted session.

        Any session the client already had is destroyed, so a token issued
        before login never becomes authenticated.

        Args:
            identity: Authenticated identity
            previous_token: Token of the client's current session, if any

        Returns:
            The new session
        """
        with logfire.span("session_service.login", user_id=str(identity.id)):
            if previous_token:
                await self.session_repository.delete(previous_token)

            now = datetime.now(timezone.utc)
            session = Session(
                token=secrets.token_urlsafe(32),
                principal_id=self.serializer.serialize(identity),
                created_at=now,
                expires_at=now + timedelta(seconds=self.settings.max_age_seconds),
            )
            saved = await self.session_repository.save(session)
            logfire.info("Session started", user_id=str(identity.id))
            return saved

    async def current_identity(self, token: str | None) -> Identity | None:
        """Resolve the identity behind a session token.

        A session whose user was deleted is cleared so later requests skip
        the lookup.

        Args:
            token: Session token from the client cookie

        Returns:
            The identity, or None for anonymous requests
        """
        session = await self.load(token)
        if session is None or session.principal_id is None:
            return None

        identity = await self.serializer.deserialize(session.principal_id)
        if identity is None:
            await self.session_repository.save(
                session.model_copy(update={"principal_id": None})
            )
        return identity

    async def logout(self, token: str | None) -> None:
        """Destroy the session behind a token. Missing sessions are ignored.

        Args:
            token: Session token from the client cookie
        """
        if not token:
            return
        with logfire.span("session_service.logout"):
            await self.session_repository.delete(token)
            logfire.info("Session destroyed")
