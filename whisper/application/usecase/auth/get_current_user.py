"""Get current user use case."""

from pydantic import BaseModel

from whisper.application.usecase.base import BaseUseCase
from whisper.domain.service import SessionService
from whisper.domain.value import AuthProvider


class GetCurrentUserRequest(BaseModel):
    """Get current user request."""

    session_token: str | None = None


class UserInfo(BaseModel):
    """Public view of the current user."""

    user_id: str
    username: str | None
    providers: list[AuthProvider]
    has_secret: bool


class GetCurrentUserResponse(BaseModel):
    """Get current user response."""

    authenticated: bool
    user: UserInfo | None = None


class GetCurrentUserUseCase(BaseUseCase):
    """Use case for resolving the identity behind a session."""

    def __init__(self, session_service: SessionService) -> None:
        self.session_service = session_service

    async def execute(self, request: GetCurrentUserRequest) -> GetCurrentUserResponse:
        identity = await self.session_service.current_identity(request.session_token)
        if identity is None:
            return GetCurrentUserResponse(authenticated=False)

        return GetCurrentUserResponse(
            authenticated=True,
            user=UserInfo(
                user_id=str(identity.id),
                username=identity.username.root if identity.username else None,
                providers=sorted(identity.providers, key=lambda p: p.value),
                has_secret=identity.secret is not None,
            ),
        )
