"""Server-side session entity."""

from datetime import datetime, timezone

from whisper.domain.model.common import DomainModel
from whisper.domain.value import UserId


class Session(DomainModel):
    """Binds an opaque client-held token to an optional principal.

    A missing principal_id means the session is anonymous.
    """

    token: str
    principal_id: UserId | None = None
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the session has passed its expiry time."""
        return (now or datetime.now(timezone.utc)) >= self.expires_at
