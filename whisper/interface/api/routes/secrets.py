"""Secret routes. Both require an authenticated session."""

import logging
from typing import Annotated

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from whisper.application.usecase.secret import ListSecretsUseCase, SubmitSecretUseCase
from whisper.application.usecase.secret.list_secrets import (
    ListSecretsRequest,
    ListSecretsResponse,
)
from whisper.application.usecase.secret.submit_secret import SubmitSecretRequest
from whisper.config import SessionSettings
from whisper.domain.error import UnauthenticatedError
from whisper.interface.api.cookies import read_session_token
from whisper.interface.api.forms import SecretForm, secret_form

logger = logging.getLogger(__name__)

router = APIRouter(tags=["secrets"], route_class=DishkaRoute)

LOGIN_REDIRECT = "/login"


@router.get("/secrets", response_model=None)
async def list_secrets(
    request: Request,
    list_secrets_use_case: FromDishka[ListSecretsUseCase],
    session_settings: FromDishka[SessionSettings],
) -> ListSecretsResponse | RedirectResponse:
    """List every submitted secret.

    Anonymous callers are redirected to /login.
    """
    try:
        return await list_secrets_use_case.execute(
            ListSecretsRequest(
                session_token=read_session_token(request, session_settings)
            )
        )
    except UnauthenticatedError:
        return RedirectResponse(url=LOGIN_REDIRECT, status_code=status.HTTP_302_FOUND)


@router.post("/submit")
async def submit_secret(
    form: Annotated[SecretForm, Depends(secret_form)],
    request: Request,
    submit_secret_use_case: FromDishka[SubmitSecretUseCase],
    session_settings: FromDishka[SessionSettings],
) -> RedirectResponse:
    """Store the caller's secret, replacing any previous one.

    Example:
        POST /submit
        {"secret": "hello"} (or the same field as a form post)

        Redirects to /secrets, or to /login for anonymous callers
    """
    try:
        result = await submit_secret_use_case.execute(
            SubmitSecretRequest(
                session_token=read_session_token(request, session_settings),
                secret=form.secret,
            )
        )
    except UnauthenticatedError:
        return RedirectResponse(
            url=LOGIN_REDIRECT, status_code=status.HTTP_303_SEE_OTHER
        )

    logger.info(f"Secret submitted by user {result.user_id}")
    return RedirectResponse(url="/secrets", status_code=status.HTTP_303_SEE_OTHER)
