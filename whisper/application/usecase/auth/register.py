"""Local registration use case."""

import logfire
from pydantic import BaseModel, SecretStr
from pydantic import ValidationError as PydanticValidationError

from whisper.application.usecase.auth.login import AuthenticatedResponse
from whisper.application.usecase.base import BaseUseCase
from whisper.domain.error import ValidationError
from whisper.domain.model.identity import Identity
from whisper.domain.service import CredentialStore, SessionService
from whisper.domain.value import Username, is_utf8_encodable


class RegisterRequest(BaseModel):
    """Local registration request."""

    username: str
    password: SecretStr
    session_token: str | None = None


class RegisterUseCase(BaseUseCase):
    """Use case for registering a local account.

    A successful registration also logs the new user in.
    """

    def __init__(
        self, credential_store: CredentialStore, session_service: SessionService
    ) -> None:
        self.credential_store = credential_store
        self.session_service = session_service

    async def execute(self, request: RegisterRequest) -> AuthenticatedResponse:
        """Create the account and bind a fresh session.

        Raises:
            ValidationError: If username or password is blank or not valid text
            AlreadyExistsError: If the username is taken
        """
        try:
            username = Username(request.username)
        except PydanticValidationError as e:
            raise ValidationError("Username must be 1-255 characters of text") from e

        password = request.password.get_secret_value()
        if not password:
            raise ValidationError("Password must not be empty")
        if not is_utf8_encodable(password):
            raise ValidationError("Password must be valid UTF-8 text")

        user = await self.credential_store.create_local(username, password)
        identity = Identity.from_user(user)
        session = await self.session_service.login(
            identity, previous_token=request.session_token
        )

        logfire.info("Registration succeeded", user_id=str(user.id))
        return AuthenticatedResponse(session_token=session.token, user_id=str(user.id))
