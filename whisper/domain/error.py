"""Domain layer errors."""

from whisper.domain.value.types import FailureReason


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class DuplicateRecordError(DomainError):
    """Raised by a repository when an insert violates a uniqueness rule."""

    def __init__(self, resource: str, key: str):
        self.resource = resource
        self.key = key
        super().__init__(f"{resource} already exists: {key}")


class StoreUnavailableError(DomainError):
    """Raised when the durable store cannot be reached.

    Fails the current request only. Never retried.
    """

    pass


class AuthenticationError(DomainError):
    """Base for authentication failures.

    Every failure carries a FailureReason so the interface layer can report
    it without inspecting message text. Messages never include passwords,
    tokens or provider secrets.
    """

    reason: FailureReason

    def __init__(self, message: str | None = None):
        super().__init__(message or self.reason.value)


class UserNotFoundError(AuthenticationError):
    """No local account matches the submitted username."""

    reason = FailureReason.USER_NOT_FOUND


class BadPasswordError(AuthenticationError):
    """The local account exists but the password did not verify."""

    reason = FailureReason.BAD_PASSWORD


class AlreadyExistsError(AuthenticationError):
    """A local account with this username is already registered."""

    reason = FailureReason.ALREADY_EXISTS


class ProviderDeniedError(AuthenticationError):
    """The user declined consent at the OAuth provider."""

    reason = FailureReason.PROVIDER_DENIED


class ProviderError(AuthenticationError):
    """The OAuth provider misbehaved or returned an unusable profile."""

    reason = FailureReason.PROVIDER_ERROR


class TokenExchangeFailedError(AuthenticationError):
    """The authorization code could not be exchanged for an access token."""

    reason = FailureReason.TOKEN_EXCHANGE_FAILED


class UnauthenticatedError(AuthenticationError):
    """A protected operation was attempted without an authenticated session."""

    reason = FailureReason.UNAUTHENTICATED
