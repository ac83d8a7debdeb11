"""Unit tests for the signed session and OAuth state cookies."""

import pytest
from fastapi import Request, Response

from whisper.config import SessionSettings
from whisper.interface.api.cookies import (
    clear_oauth_state_cookie,
    clear_session_cookie,
    read_oauth_state,
    read_session_token,
    set_oauth_state_cookie,
    set_session_cookie,
    sign_session_token,
)


@pytest.fixture
def settings():
    return SessionSettings(secret="cookie-test-secret")


def _request(cookie_header: str | None) -> Request:
    headers = []
    if cookie_header is not None:
        headers.append((b"cookie", cookie_header.encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


class TestSessionCookie:
    def test_signed_token_round_trips(self, settings):
        signed = sign_session_token("opaque-token", settings)

        assert signed != "opaque-token"
        request = _request(f"{settings.cookie_name}={signed}")
        assert read_session_token(request, settings) == "opaque-token"

    def test_missing_cookie(self, settings):
        assert read_session_token(_request(None), settings) is None

    @pytest.mark.parametrize("value", ["opaque-token", "garbage.value.here", ""])
    def test_unsigned_value_is_rejected(self, settings, value):
        request = _request(f"{settings.cookie_name}={value}")

        assert read_session_token(request, settings) is None

    def test_other_secret_is_rejected(self, settings):
        signed = sign_session_token("opaque-token", SessionSettings(secret="other"))
        request = _request(f"{settings.cookie_name}={signed}")

        assert read_session_token(request, settings) is None

    def test_expired_signature_is_rejected(self, settings):
        signed = sign_session_token("opaque-token", settings)
        expired = SessionSettings(secret=settings.secret, max_age_seconds=-1)
        request = _request(f"{settings.cookie_name}={signed}")

        assert read_session_token(request, expired) is None

    def test_set_cookie_attributes(self, settings):
        response = Response()

        set_session_cookie(response, "opaque-token", settings)

        header = response.headers["set-cookie"]
        assert header.startswith(f"{settings.cookie_name}=")
        assert "opaque-token" not in header
        assert "HttpOnly" in header
        assert "Path=/" in header
        assert "SameSite=lax" in header
        assert "Secure" not in header

    def test_secure_cookie_flag(self):
        settings = SessionSettings(secret="s", secure_cookie=True)
        response = Response()

        set_session_cookie(response, "opaque-token", settings)

        assert "Secure" in response.headers["set-cookie"]

    def test_clear_cookie(self, settings):
        response = Response()

        clear_session_cookie(response, settings)

        header = response.headers["set-cookie"]
        assert header.startswith(f'{settings.cookie_name}=""')
        assert "Max-Age=0" in header


def _state_cookie(response: Response) -> str:
    header = response.headers["set-cookie"]
    return header.split(";", 1)[0]


class TestOAuthStateCookie:
    def test_state_round_trips(self, settings):
        response = Response()

        set_oauth_state_cookie(response, "state-abc", settings, max_age=600)

        request = _request(_state_cookie(response))
        assert read_oauth_state(request, settings, max_age=600) == "state-abc"

    def test_cookie_attributes(self, settings):
        response = Response()

        set_oauth_state_cookie(response, "state-abc", settings, max_age=600)

        header = response.headers["set-cookie"]
        assert header.startswith(f"{settings.cookie_name}_oauth_state=")
        assert _state_cookie(response).split("=", 1)[1] != "state-abc"
        assert "HttpOnly" in header
        assert "Path=/auth" in header
        assert "SameSite=lax" in header
        assert "Max-Age=600" in header

    def test_missing_cookie(self, settings):
        assert read_oauth_state(_request(None), settings, max_age=600) is None

    def test_unsigned_state_is_rejected(self, settings):
        request = _request(f"{settings.cookie_name}_oauth_state=state-abc")

        assert read_oauth_state(request, settings, max_age=600) is None

    def test_session_cookie_value_is_not_a_state(self, settings):
        signed = sign_session_token("state-abc", settings)
        request = _request(f"{settings.cookie_name}_oauth_state={signed}")

        assert read_oauth_state(request, settings, max_age=600) is None

    def test_expired_state_is_rejected(self, settings):
        response = Response()
        set_oauth_state_cookie(response, "state-abc", settings, max_age=600)

        request = _request(_state_cookie(response))
        assert read_oauth_state(request, settings, max_age=-1) is None

    def test_clear_state_cookie(self, settings):
        response = Response()

        clear_oauth_state_cookie(response, settings)

        header = response.headers["set-cookie"]
        assert header.startswith(f'{settings.cookie_name}_oauth_state=""')
        assert "Max-Age=0" in header
        assert "Path=/auth" in header
