"""Authentication routes.

Local login and registration take form or JSON bodies. Every outcome is a
redirect, with the failure reason in the `error` query parameter.
"""

import logging
from typing import Annotated

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from whisper.application.usecase.auth import (
    BeginOAuthUseCase,
    CompleteOAuthUseCase,
    GetCurrentUserUseCase,
    LocalLoginUseCase,
    LogoutUseCase,
    RegisterUseCase,
)
from whisper.application.usecase.auth.get_current_user import (
    GetCurrentUserRequest,
    GetCurrentUserResponse,
)
from whisper.application.usecase.auth.login import (
    AuthenticatedResponse,
    LocalLoginRequest,
)
from whisper.application.usecase.auth.logout import LogoutRequest
from whisper.application.usecase.auth.oauth import (
    BeginOAuthRequest,
    CompleteOAuthRequest,
)
from whisper.application.usecase.auth.register import RegisterRequest
from whisper.config import AuthSettings, SessionSettings
from whisper.domain.error import (
    AlreadyExistsError,
    AuthenticationError,
    ValidationError,
)
from whisper.domain.value import AuthProvider
from whisper.interface.api.cookies import (
    clear_oauth_state_cookie,
    clear_session_cookie,
    read_oauth_state,
    read_session_token,
    set_oauth_state_cookie,
    set_session_cookie,
)
from whisper.interface.api.forms import CredentialsForm, credentials_form

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"], route_class=DishkaRoute)

SUCCESS_REDIRECT = "/secrets"


def _authenticated_redirect(
    result: AuthenticatedResponse, settings: SessionSettings, status_code: int
) -> RedirectResponse:
    # Cookies must be set on the returned response object
    response = RedirectResponse(url=SUCCESS_REDIRECT, status_code=status_code)
    set_session_cookie(response, result.session_token, settings)
    return response


def _failure_redirect(path: str, reason: str, status_code: int) -> RedirectResponse:
    return RedirectResponse(url=f"{path}?error={reason}", status_code=status_code)


@router.post("/register")
async def register(
    form: Annotated[CredentialsForm, Depends(credentials_form)],
    request: Request,
    register_use_case: FromDishka[RegisterUseCase],
    session_settings: FromDishka[SessionSettings],
) -> RedirectResponse:
    """Register a local account and log it in.

    Example:
        POST /register
        {"username": "alice", "password": "pw123"}

        Redirects to /secrets with the session cookie set, or to
        /register?error=already_exists
    """
    try:
        result = await register_use_case.execute(
            RegisterRequest(
                username=form.username,
                password=form.password,
                session_token=read_session_token(request, session_settings),
            )
        )
    except AlreadyExistsError as e:
        logger.info("Registration rejected: username taken")
        return _failure_redirect("/register", e.reason.value, status.HTTP_303_SEE_OTHER)
    except ValidationError:
        logger.info("Registration rejected: invalid input")
        return _failure_redirect("/register", "invalid", status.HTTP_303_SEE_OTHER)

    logger.info(f"Registered user {result.user_id}")
    return _authenticated_redirect(
        result, session_settings, status.HTTP_303_SEE_OTHER
    )


@router.post("/login")
async def login(
    form: Annotated[CredentialsForm, Depends(credentials_form)],
    request: Request,
    login_use_case: FromDishka[LocalLoginUseCase],
    session_settings: FromDishka[SessionSettings],
) -> RedirectResponse:
    """Log in with a local username and password.

    Redirects to /secrets on success, or to /login?error=<reason> where
    reason is user_not_found or bad_password.
    """
    try:
        result = await login_use_case.execute(
            LocalLoginRequest(
                username=form.username,
                password=form.password,
                session_token=read_session_token(request, session_settings),
            )
        )
    except AuthenticationError as e:
        logger.info(f"Local login failed: {e.reason.value}")
        return _failure_redirect("/login", e.reason.value, status.HTTP_303_SEE_OTHER)

    logger.info(f"Local login for user {result.user_id}")
    return _authenticated_redirect(
        result, session_settings, status.HTTP_303_SEE_OTHER
    )


@router.get("/logout")
async def logout(
    request: Request,
    logout_use_case: FromDishka[LogoutUseCase],
    session_settings: FromDishka[SessionSettings],
) -> RedirectResponse:
    """Destroy the session and clear its cookie."""
    await logout_use_case.execute(
        LogoutRequest(session_token=read_session_token(request, session_settings))
    )
    response = RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)
    clear_session_cookie(response, session_settings)
    return response


@router.get("/auth/me", response_model=GetCurrentUserResponse)
async def get_current_user(
    request: Request,
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    session_settings: FromDishka[SessionSettings],
) -> GetCurrentUserResponse:
    """Get current user if authenticated, or return unauthenticated status.

    Safe to call without a session.

    Examples:
        Authenticated:
        {"authenticated": true, "user": {"user_id": "...", "username": "alice", ...}}

        Unauthenticated:
        {"authenticated": false, "user": null}
    """
    return await get_current_user_use_case.execute(
        GetCurrentUserRequest(
            session_token=read_session_token(request, session_settings)
        )
    )


@router.get("/auth/{provider}")
async def begin_oauth(
    provider: AuthProvider,
    begin_oauth_use_case: FromDishka[BeginOAuthUseCase],
    session_settings: FromDishka[SessionSettings],
    auth_settings: FromDishka[AuthSettings],
) -> RedirectResponse:
    """Redirect to the provider's consent page.

    Example:
        GET /auth/google
        Redirects to: https://accounts.google.com/o/oauth2/v2/auth?...
    """
    logger.info(f"Initiating {provider.value} login")
    result = await begin_oauth_use_case.execute(BeginOAuthRequest(provider=provider))
    response = RedirectResponse(
        url=result.authorization_url, status_code=status.HTTP_302_FOUND
    )
    set_oauth_state_cookie(
        response, result.state, session_settings, auth_settings.oauth_state_ttl_seconds
    )
    return response


@router.get("/auth/{provider}/callback")
async def oauth_callback(
    provider: AuthProvider,
    request: Request,
    complete_oauth_use_case: FromDishka[CompleteOAuthUseCase],
    session_settings: FromDishka[SessionSettings],
    auth_settings: FromDishka[AuthSettings],
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    error_description: str | None = None,
) -> RedirectResponse:
    """Handle the provider redirect and complete login.

    Example:
        GET /auth/facebook/callback?code=abc123&state=xyz789

        Redirects to /secrets with the session cookie set, or to
        /login?error=<reason> where reason is provider_denied,
        provider_error or token_exchange_failed. The state must match the
        signed state cookie set when this browser began the flow.
    """
    logger.info(f"OAuth callback received: provider={provider.value}")

    try:
        result = await complete_oauth_use_case.execute(
            CompleteOAuthRequest(
                provider=provider,
                code=code,
                state=state,
                error=error,
                error_description=error_description,
                expected_state=read_oauth_state(
                    request, session_settings, auth_settings.oauth_state_ttl_seconds
                ),
                session_token=read_session_token(request, session_settings),
            )
        )
    except AuthenticationError as e:
        logger.warning(
            f"OAuth login failed: provider={provider.value}, reason={e.reason.value}"
        )
        response = _failure_redirect("/login", e.reason.value, status.HTTP_302_FOUND)
        clear_oauth_state_cookie(response, session_settings)
        return response

    logger.info(f"OAuth login for user {result.user_id} via {provider.value}")
    response = _authenticated_redirect(result, session_settings, status.HTTP_302_FOUND)
    clear_oauth_state_cookie(response, session_settings)
    return response
