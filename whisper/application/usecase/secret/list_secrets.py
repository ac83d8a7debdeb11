"""List secrets use case."""

from pydantic import BaseModel

from whisper.application.usecase.base import BaseUseCase
from whisper.domain.error import UnauthenticatedError
from whisper.domain.service import CredentialStore, SessionService


class ListSecretsRequest(BaseModel):
    """List secrets request."""

    session_token: str | None = None


class ListSecretsResponse(BaseModel):
    """Anonymous secret texts, oldest submitter first."""

    secrets: list[str]


class ListSecretsUseCase(BaseUseCase):
    """Use case for reading every submitted secret.

    Only the texts are returned; who wrote them is never revealed.
    """

    def __init__(
        self, session_service: SessionService, credential_store: CredentialStore
    ) -> None:
        self.session_service = session_service
        self.credential_store = credential_store

    async def execute(self, request: ListSecretsRequest) -> ListSecretsResponse:
        """List secrets for an authenticated caller.

        Raises:
            UnauthenticatedError: If the session is anonymous
        """
        identity = await self.session_service.current_identity(request.session_token)
        if identity is None:
            raise UnauthenticatedError()

        users = await self.credential_store.list_users_with_secret()
        return ListSecretsResponse(
            secrets=[user.secret for user in users if user.secret is not None]
        )
