"""Repository interfaces for the Whisper domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from whisper.domain.repository.session import SessionRepository
from whisper.domain.repository.user_identity import UserIdentityRepository

__all__ = [
    "SessionRepository",
    "UserIdentityRepository",
]
