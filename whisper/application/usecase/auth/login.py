"""Local login use case."""

import logfire
from pydantic import BaseModel, SecretStr
from pydantic import ValidationError as PydanticValidationError

from whisper.application.usecase.base import BaseUseCase
from whisper.domain.error import UserNotFoundError
from whisper.domain.service import AuthService, LocalCredentials, SessionService
from whisper.domain.value import Username


class LocalLoginRequest(BaseModel):
    """Username/password login request."""

    username: str
    password: SecretStr
    session_token: str | None = None  # Client's current session, replaced on success


class AuthenticatedResponse(BaseModel):
    """Result of any successful authentication.

    The session token goes back to the client in the signed session cookie.
    """

    session_token: str
    user_id: str


class LocalLoginUseCase(BaseUseCase):
    """Use case for username/password login."""

    def __init__(
        self, auth_service: AuthService, session_service: SessionService
    ) -> None:
        """Initialize local login use case.

        Args:
            auth_service: Authentication domain service
            session_service: Session domain service
        """
        self.auth_service = auth_service
        self.session_service = session_service

    async def execute(self, request: LocalLoginRequest) -> AuthenticatedResponse:
        """Verify the credentials and bind a fresh session.

        Args:
            request: Submitted credentials

        Returns:
            New session token and user id

        Raises:
            UserNotFoundError: If no local account has this username
            BadPasswordError: If the password does not match
        """
        try:
            username = Username(request.username)
        except PydanticValidationError as e:
            # A blank username can never match an account
            raise UserNotFoundError() from e

        identity = await self.auth_service.authenticate_local(
            LocalCredentials(username=username, password=request.password)
        )
        session = await self.session_service.login(
            identity, previous_token=request.session_token
        )

        logfire.info("Local login succeeded", user_id=str(identity.id))
        return AuthenticatedResponse(
            session_token=session.token, user_id=str(identity.id)
        )
