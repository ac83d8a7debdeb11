"""In-memory repository implementations for testing."""

from .session import InMemorySessionRepository
from .user_identity import InMemoryUserIdentityRepository

__all__ = [
    "InMemorySessionRepository",
    "InMemoryUserIdentityRepository",
]
