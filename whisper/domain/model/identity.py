"""Request-scoped identity.

What an authenticated request knows about its principal. Built from a
UserIdentity record; carries no credential material.
"""

from whisper.domain.model.common import DomainModel
from whisper.domain.model.user_identity import UserIdentity
from whisper.domain.value import AuthProvider, UserId, Username


class Identity(DomainModel):
    """Authenticated principal of a request."""

    id: UserId
    username: Username | None = None
    providers: frozenset[AuthProvider] = frozenset()
    secret: str | None = None

    @classmethod
    def from_user(cls, user: UserIdentity) -> "Identity":
        """Project a stored user record onto its credential-free view."""
        return cls(
            id=user.id,
            username=user.username,
            providers=frozenset(user.external_credentials),
            secret=user.secret,
        )
