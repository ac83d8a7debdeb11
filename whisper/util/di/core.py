"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from whisper.config import AuthSettings, PasswordSettings, SessionSettings, Settings
from whisper.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_session_settings(self, settings: Settings) -> SessionSettings:
        """Provide session settings."""
        return settings.session

    @provide(scope=Scope.APP)
    def provide_password_settings(self, settings: Settings) -> PasswordSettings:
        return settings.passwords
