"""PostgreSQL implementation of UserIdentity repository."""

from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from whisper.domain.error import DuplicateRecordError
from whisper.domain.model import UserIdentity
from whisper.domain.repository import UserIdentityRepository
from whisper.domain.value import AuthProvider, UserId, Username
from whisper.persistence.database import translate_store_errors
from whisper.persistence.mappers import (
    external_credentials_to_rows,
    row_to_user_identity,
    user_identity_to_dict,
)
from whisper.persistence.tables import external_credentials_table, users_table


class PostgresUserIdentityRepository(UserIdentityRepository):
    """PostgreSQL implementation of UserIdentityRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _hydrate(self, rows: list[dict[str, Any]]) -> list[UserIdentity]:
        """Attach external credentials to user rows with a single query."""
        if not rows:
            return []

        stmt = select(external_credentials_table).where(
            external_credentials_table.c.user_id.in_([row["id"] for row in rows])
        )
        result = await self.session.execute(stmt)
        by_user: dict[Any, list[dict[str, Any]]] = defaultdict(list)
        for ext in result.mappings().all():
            by_user[ext["user_id"]].append(dict(ext))

        return [row_to_user_identity(row, by_user[row["id"]]) for row in rows]

    async def _find_one(self, stmt) -> Optional[UserIdentity]:
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        if not row:
            return None
        users = await self._hydrate([dict(row)])
        return users[0]

    @translate_store_errors
    async def find_by_id(self, user_id: UserId) -> Optional[UserIdentity]:
        """Find a user by ID.

        Args:
            user_id: User ID to look up

        Returns:
            UserIdentity if found, None otherwise
        """
        stmt = select(users_table).where(users_table.c.id == user_id)
        return await self._find_one(stmt)

    @translate_store_errors
    async def find_by_username(self, username: Username) -> Optional[UserIdentity]:
        """Find a locally registered user by username.

        Args:
            username: Username to search for

        Returns:
            UserIdentity if found, None otherwise
        """
        stmt = select(users_table).where(users_table.c.username == username.root)
        return await self._find_one(stmt)

    @translate_store_errors
    async def find_by_provider(
        self, provider: AuthProvider, provider_user_id: str
    ) -> Optional[UserIdentity]:
        """Find a user by their external provider identity.

        Args:
            provider: The authentication provider
            provider_user_id: The user's ID on that provider

        Returns:
            UserIdentity if found, None otherwise
        """
        stmt = (
            select(users_table)
            .select_from(
                users_table.join(
                    external_credentials_table,
                    users_table.c.id == external_credentials_table.c.user_id,
                )
            )
            .where(external_credentials_table.c.provider == provider.value)
            .where(external_credentials_table.c.provider_user_id == provider_user_id)
        )
        return await self._find_one(stmt)

    @translate_store_errors
    async def insert(self, user: UserIdentity) -> UserIdentity:
        """Insert a user and its external credentials.

        Runs inside a SAVEPOINT so a uniqueness conflict rolls back only
        this insert and leaves the request transaction usable for the
        follow-up read.

        Args:
            user: UserIdentity to insert

        Returns:
            Inserted user

        Raises:
            DuplicateRecordError: If the username or provider identity is taken
        """
        try:
            async with self.session.begin_nested():
                await self.session.execute(
                    users_table.insert().values(**user_identity_to_dict(user))
                )
                ext_rows = external_credentials_to_rows(user)
                if ext_rows:
                    await self.session.execute(
                        external_credentials_table.insert(), ext_rows
                    )
        except IntegrityError as e:
            raise DuplicateRecordError("User", str(user.id)) from e

        return user

    @translate_store_errors
    async def set_secret(self, user_id: UserId, secret: str) -> bool:
        """Set a user's secret text.

        Args:
            user_id: User to update
            secret: New secret text

        Returns:
            True if a row was updated
        """
        stmt = (
            users_table.update()
            .where(users_table.c.id == user_id)
            .values(secret=secret, updated_at=datetime.now(timezone.utc))
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    @translate_store_errors
    async def find_all_with_secret(self) -> list[UserIdentity]:
        """Get all users with a secret, oldest first.

        Returns:
            List of users
        """
        stmt = (
            select(users_table)
            .where(users_table.c.secret.is_not(None))
            .order_by(users_table.c.created_at.asc(), users_table.c.id.asc())
        )
        result = await self.session.execute(stmt)
        rows = [dict(row) for row in result.mappings().all()]
        return await self._hydrate(rows)

    @translate_store_errors
    async def delete(self, user_id: UserId) -> None:
        """Delete a user. External credentials cascade, sessions are orphaned.

        Args:
            user_id: User to delete
        """
        stmt = users_table.delete().where(users_table.c.id == user_id)
        await self.session.execute(stmt)
