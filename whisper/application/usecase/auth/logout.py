"""Logout use case."""

from pydantic import BaseModel

from whisper.application.usecase.base import BaseUseCase
from whisper.domain.service import SessionService


class LogoutRequest(BaseModel):
    """Logout request."""

    session_token: str | None = None


class LogoutUseCase(BaseUseCase):
    """Use case for ending a session. Anonymous callers are a no-op."""

    def __init__(self, session_service: SessionService) -> None:
        self.session_service = session_service

    async def execute(self, request: LogoutRequest) -> None:
        await self.session_service.logout(request.session_token)
