"""Authentication use cases."""

from .get_current_user import GetCurrentUserUseCase
from .login import LocalLoginUseCase
from .logout import LogoutUseCase
from .oauth import BeginOAuthUseCase, CompleteOAuthUseCase
from .register import RegisterUseCase

__all__ = [
    "BeginOAuthUseCase",
    "CompleteOAuthUseCase",
    "GetCurrentUserUseCase",
    "LocalLoginUseCase",
    "LogoutUseCase",
    "RegisterUseCase",
]
