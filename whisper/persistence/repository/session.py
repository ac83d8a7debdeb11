"""PostgreSQL implementation of Session repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from whisper.domain.model import Session
from whisper.domain.repository import SessionRepository
from whisper.persistence.database import translate_store_errors
from whisper.persistence.mappers import row_to_session, session_to_dict
from whisper.persistence.tables import sessions_table


class PostgresSessionRepository(SessionRepository):
    """PostgreSQL implementation of SessionRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    @translate_store_errors
    async def find_by_token(self, token: str) -> Optional[Session]:
        """Find a session by token."""
        stmt = select(sessions_table).where(sessions_table.c.token == token)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_session(dict(row)) if row else None

    @translate_store_errors
    async def save(self, session: Session) -> Session:
        """Upsert a session keyed by token."""
        values = session_to_dict(session)
        stmt = (
            insert(sessions_table)
            .values(**values)
            .on_conflict_do_update(
                index_elements=[sessions_table.c.token],
                set_={
                    "principal_id": values["principal_id"],
                    "expires_at": values["expires_at"],
                },
            )
        )
        await self.session.execute(stmt)
        return session

    @translate_store_errors
    async def delete(self, token: str) -> None:
        """Delete a session by token."""
        stmt = sessions_table.delete().where(sessions_table.c.token == token)
        await self.session.execute(stmt)
