"""Domain value objects for Whisper.

Value objects are immutable and defined by their values, not identity.
"""

from enum import Enum

from pydantic import SecretStr, field_validator

from whisper.domain.value.common import RootValueObject, ValueObject


def is_utf8_encodable(text: str) -> bool:
    """Check text holds no lone surrogates, which JSON decoding lets through."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


class AuthProvider(str, Enum):
    """Supported external authentication providers."""

    GOOGLE = "google"
    FACEBOOK = "facebook"


class FailureReason(str, Enum):
    """Why an authentication attempt or protected operation failed."""

    USER_NOT_FOUND = "user_not_found"
    BAD_PASSWORD = "bad_password"
    ALREADY_EXISTS = "already_exists"
    PROVIDER_DENIED = "provider_denied"
    PROVIDER_ERROR = "provider_error"
    TOKEN_EXCHANGE_FAILED = "token_exchange_failed"
    UNAUTHENTICATED = "unauthenticated"


class Username(RootValueObject[str]):
    """Local login name (a username or an email address).

    Matching is exact; surrounding whitespace is stripped.
    """

    @field_validator("root")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate username is not blank, within length limits and valid UTF-8."""
        v = v.strip()
        if len(v) < 1 or len(v) > 255:
            raise ValueError("Username must be 1-255 characters")
        if not is_utf8_encodable(v):
            raise ValueError("Username must be valid UTF-8 text")
        return v


class PasswordHash(ValueObject):
    """Output of the password hasher.

    `hash` embeds the argon2 cost parameters; `salt` is hex encoded.
    """

    hash: SecretStr
    salt: SecretStr


class OAuthProviderInfo(ValueObject):
    """Verified profile returned by an OAuth provider."""

    provider: AuthProvider
    provider_user_id: str  # Stable subject id (Google `sub`, Facebook `id`)
    display_name: str | None = None
