"""Unit tests for settings and credential configuration."""

import pytest
from dishka import make_async_container
from pydantic import ValidationError as PydanticValidationError

from whisper.adapter.facebook import FacebookOAuthClient
from whisper.adapter.google import GoogleOAuthClient
from whisper.config import PLACEHOLDER, Settings
from whisper.util.di.core import ProdConfigProvider
from whisper.util.di.infrastructure import ProdFacebookProvider, ProdGoogleProvider
from whisper.util.error import ConfigurationError


class TestSessionSecret:
    @pytest.mark.parametrize("environment", ["staging", "production"])
    def test_placeholder_secret_refused_when_deployed(self, monkeypatch, environment):
        monkeypatch.delenv("SESSION__SECRET")

        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None, environment=environment)

    @pytest.mark.parametrize("environment", ["test", "development"])
    def test_placeholder_secret_allowed_locally(self, monkeypatch, environment):
        monkeypatch.delenv("SESSION__SECRET")

        settings = Settings(_env_file=None, environment=environment)

        assert settings.session.secret == PLACEHOLDER

    def test_configured_secret_when_deployed(self):
        settings = Settings(
            _env_file=None, environment="production", host="whisper.example.com"
        )

        assert settings.session.secret == "test-session-secret"
        assert settings.session.secure_cookie is True


class TestRequireCredential:
    def test_empty_always_refused(self):
        settings = Settings(_env_file=None, environment="development")

        with pytest.raises(ConfigurationError):
            settings.require_credential("", "Google OAuth client ID")

    def test_placeholder_refused_when_deployed(self):
        settings = Settings(_env_file=None, environment="production")

        with pytest.raises(ConfigurationError, match="Facebook app secret"):
            settings.require_credential(PLACEHOLDER, "Facebook app secret")

    def test_placeholder_allowed_in_development(self):
        settings = Settings(_env_file=None, environment="development")

        assert settings.require_credential(PLACEHOLDER, "Google OAuth client ID") == (
            PLACEHOLDER
        )


class TestOAuthClientProviders:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "client_type", [GoogleOAuthClient, FacebookOAuthClient]
    )
    async def test_unconfigured_client_refused_in_production(
        self, monkeypatch, client_type
    ):
        monkeypatch.setenv("ENVIRONMENT", "production")
        container = make_async_container(
            ProdConfigProvider(), ProdGoogleProvider(), ProdFacebookProvider()
        )

        try:
            with pytest.raises(ConfigurationError):
                await container.get(client_type)
        finally:
            await container.close()

    @pytest.mark.asyncio
    async def test_configured_client_in_production(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("AUTH__GOOGLE__CLIENT_ID", "google-id")
        monkeypatch.setenv("AUTH__GOOGLE__CLIENT_SECRET", "google-secret")
        container = make_async_container(ProdConfigProvider(), ProdGoogleProvider())

        try:
            client = await container.get(GoogleOAuthClient)
        finally:
            await container.close()

        assert client.client_id == "google-id"
