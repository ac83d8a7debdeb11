"""PostgreSQL repository implementations."""

from whisper.persistence.repository.session import PostgresSessionRepository
from whisper.persistence.repository.user_identity import (
    PostgresUserIdentityRepository,
)

__all__ = [
    "PostgresSessionRepository",
    "PostgresUserIdentityRepository",
]
