"""Domain value objects for Whisper."""

from whisper.domain.value.identifiers import UserId
from whisper.domain.value.types import (
    AuthProvider,
    FailureReason,
    OAuthProviderInfo,
    PasswordHash,
    Username,
    is_utf8_encodable,
)

__all__ = [
    # Identifiers
    "UserId",
    # Types
    "AuthProvider",
    "FailureReason",
    "OAuthProviderInfo",
    "PasswordHash",
    "Username",
    "is_utf8_encodable",
]
