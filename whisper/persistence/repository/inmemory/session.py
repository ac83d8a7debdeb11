"""In-memory session repository for testing."""

from typing import Optional

from whisper.domain.model.session import Session
from whisper.domain.repository.session import SessionRepository


class InMemorySessionRepository(SessionRepository):
    """In-memory implementation of SessionRepository for testing."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    async def find_by_token(self, token: str) -> Optional[Session]:
        return self._sessions.get(token)

    async def save(self, session: Session) -> Session:
        self._sessions[session.token] = session
        return session

    async def delete(self, token: str) -> None:
        self._sessions.pop(token, None)
