"""Signed cookies.

The session cookie carries only the opaque session token, signed with the
session secret so a tampered or forged value is treated as no session at all.
A second short-lived cookie holds the state of an OAuth flow in progress.
"""

from fastapi import Request, Response
from itsdangerous import BadSignature, URLSafeTimedSerializer

from whisper.config import SessionSettings

_SALT = "whisper.session.v1"
_STATE_SALT = "whisper.oauth-state.v1"
_STATE_PATH = "/auth"


def _serializer(
    settings: SessionSettings, salt: str = _SALT
) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret_key=settings.secret, salt=salt)


def _state_cookie_name(settings: SessionSettings) -> str:
    return f"{settings.cookie_name}_oauth_state"


def sign_session_token(token: str, settings: SessionSettings) -> str:
    return _serializer(settings).dumps(token)


def read_session_token(request: Request, settings: SessionSettings) -> str | None:
    """Get the session token from the request cookie.

    Returns:
        The token, or None if the cookie is absent, tampered or too old
    """
    raw = request.cookies.get(settings.cookie_name)
    if not raw:
        return None
    try:
        token = _serializer(settings).loads(raw, max_age=settings.max_age_seconds)
    except BadSignature:
        # BadTimeSignature and SignatureExpired are subclasses
        return None
    return token if isinstance(token, str) and token else None


def set_session_cookie(
    response: Response, token: str, settings: SessionSettings
) -> None:
    """Attach the signed session token to a response."""
    response.set_cookie(
        key=settings.cookie_name,
        value=sign_session_token(token, settings),
        httponly=True,
        secure=settings.secure_cookie,
        samesite=settings.same_site,
        path="/",
        max_age=settings.max_age_seconds,
    )


def clear_session_cookie(response: Response, settings: SessionSettings) -> None:
    # Delete with the same path it was set with
    response.delete_cookie(key=settings.cookie_name, path="/")


def set_oauth_state_cookie(
    response: Response, state: str, settings: SessionSettings, max_age: int
) -> None:
    """Bind a begun OAuth flow to this browser.

    SameSite=Lax so the cookie still rides the provider's top-level redirect
    back to the callback.
    """
    response.set_cookie(
        key=_state_cookie_name(settings),
        value=_serializer(settings, _STATE_SALT).dumps(state),
        httponly=True,
        secure=settings.secure_cookie,
        samesite="lax",
        path=_STATE_PATH,
        max_age=max_age,
    )


def read_oauth_state(
    request: Request, settings: SessionSettings, max_age: int
) -> str | None:
    """Get the state of the OAuth flow this browser began, if any."""
    raw = request.cookies.get(_state_cookie_name(settings))
    if not raw:
        return None
    try:
        state = _serializer(settings, _STATE_SALT).loads(raw, max_age=max_age)
    except BadSignature:
        return None
    return state if isinstance(state, str) and state else None


def clear_oauth_state_cookie(response: Response, settings: SessionSettings) -> None:
    response.delete_cookie(key=_state_cookie_name(settings), path=_STATE_PATH)
