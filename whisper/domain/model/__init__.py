"""Domain model entities for Whisper."""

from whisper.domain.model.identity import Identity
from whisper.domain.model.session import Session
from whisper.domain.model.user_identity import LocalCredential, UserIdentity

__all__ = [
    "Identity",
    "LocalCredential",
    "Session",
    "UserIdentity",
]
