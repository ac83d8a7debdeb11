"""Submit secret use case."""

from pydantic import BaseModel

from whisper.application.usecase.base import BaseUseCase
from whisper.domain.error import UnauthenticatedError, ValidationError
from whisper.domain.service import CredentialStore, SessionService
from whisper.domain.value import is_utf8_encodable


class SubmitSecretRequest(BaseModel):
    """Submit secret request."""

    session_token: str | None = None
    secret: str


class SubmitSecretResponse(BaseModel):
    """Submit secret response."""

    user_id: str


class SubmitSecretUseCase(BaseUseCase):
    """Use case for storing the caller's secret."""

    def __init__(
        self, session_service: SessionService, credential_store: CredentialStore
    ) -> None:
        """Initialize submit secret use case.

        Args:
            session_service: Session domain service
            credential_store: Credential store domain service
        """
        self.session_service = session_service
        self.credential_store = credential_store

    async def execute(self, request: SubmitSecretRequest) -> SubmitSecretResponse:
        """Replace the caller's secret.

        Raises:
            UnauthenticatedError: If the session is anonymous
            ValidationError: If the secret is blank or not valid text
        """
        identity = await self.session_service.current_identity(request.session_token)
        if identity is None:
            raise UnauthenticatedError()

        if not request.secret.strip():
            raise ValidationError("Secret must not be empty")
        if not is_utf8_encodable(request.secret):
            raise ValidationError("Secret must be valid UTF-8 text")

        await self.credential_store.set_secret(identity.id, request.secret)
        return SubmitSecretResponse(user_id=str(identity.id))
