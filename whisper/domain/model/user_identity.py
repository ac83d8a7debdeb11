"""User identity entity.

The durable record behind every account, whichever way it was created.
"""

from datetime import datetime, timezone

from pydantic import Field, SecretStr

from whisper.domain.model.common import DomainModel
from whisper.domain.value import AuthProvider, UserId, Username


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LocalCredential(DomainModel):
    """Username/password credential of a locally registered user.

    Hash and salt are SecretStr so they never render in reprs, logs or
    JSON dumps.
    """

    username: Username
    password_hash: SecretStr
    password_salt: SecretStr


class UserIdentity(DomainModel):
    """User record.

    A user either registered locally (local_credential is set) or first
    signed in through an OAuth provider (external_credentials holds the
    provider subject id). Each (provider, subject id) pair belongs to at most
    one user.
    """

    id: UserId
    local_credential: LocalCredential | None = None
    external_credentials: dict[AuthProvider, str] = Field(default_factory=dict)
    secret: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def username(self) -> Username | None:
        """Local username, if the user registered locally."""
        if self.local_credential is None:
            return None
        return self.local_credential.username

    @property
    def has_secret(self) -> bool:
        return self.secret is not None
