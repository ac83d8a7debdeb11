"""Request bodies for the redirect-based routes.

HTML forms post `application/x-www-form-urlencoded` (or multipart); API
clients post JSON. Both decode into the same pydantic model. Validation
errors never echo the submitted input, which may hold a password.
"""

from typing import TypeVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, SecretStr
from pydantic import ValidationError as PydanticValidationError

M = TypeVar("M", bound=BaseModel)

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class CredentialsForm(BaseModel):
    """Username/password body for /login and /register."""

    username: str
    password: SecretStr


class SecretForm(BaseModel):
    """Body for /submit."""

    secret: str


async def parse_body(request: Request, model: type[M]) -> M:
    """Decode a form or JSON body into `model`.

    Raises:
        RequestValidationError: If the body is malformed or fails validation
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_TYPES):
        data = dict(await request.form())
    else:
        try:
            data = await request.json()
        except ValueError as e:
            raise RequestValidationError(
                [{"type": "json_invalid", "loc": ("body",), "msg": "Invalid JSON"}]
            ) from e

    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise RequestValidationError(
            [
                {**error, "loc": ("body", *error["loc"])}
                for error in e.errors(
                    include_url=False, include_context=False, include_input=False
                )
            ]
        ) from e


async def credentials_form(request: Request) -> CredentialsForm:
    return await parse_body(request, CredentialsForm)


async def secret_form(request: Request) -> SecretForm:
    return await parse_body(request, SecretForm)
