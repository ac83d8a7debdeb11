"""Session repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from whisper.domain.model.session import Session


class SessionRepository(ABC):
    """Server-side session store keyed by session token."""

    @abstractmethod
    async def find_by_token(self, token: str) -> Optional[Session]:
        """Find a session by token.

        Expired sessions may still be returned; callers check expiry.

        Args:
            token: Opaque session token

        Returns:
            The session if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, session: Session) -> Session:
        """Save a session (create or update).

        Args:
            session: The session to save

        Returns:
            The saved session
        """
        pass

    @abstractmethod
    async def delete(self, token: str) -> None:
        """Delete a session. Deleting a missing session is a no-op.

        Args:
            token: Opaque session token
        """
        pass
