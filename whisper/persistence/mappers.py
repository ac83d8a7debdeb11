"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict, Iterable
from uuid import UUID

from pydantic import SecretStr

from whisper.domain.model import LocalCredential, Session, UserIdentity
from whisper.domain.value import AuthProvider, UserId, Username


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_user_identity(
    row: Dict[str, Any], external_rows: Iterable[Dict[str, Any]] = ()
) -> UserIdentity:
    """Convert a users row and its external credential rows to a UserIdentity.

    Args:
        row: users row as dict
        external_rows: external_credentials rows belonging to the user

    Returns:
        UserIdentity domain model
    """
    local_credential = None
    if row.get("username") is not None:
        local_credential = LocalCredential(
            username=Username(row["username"]),
            password_hash=SecretStr(row["password_hash"]),
            password_salt=SecretStr(row["password_salt"]),
        )

    return UserIdentity(
        id=UserId(_uuid(row["id"])),
        local_credential=local_credential,
        external_credentials={
            AuthProvider(ext["provider"]): ext["provider_user_id"]
            for ext in external_rows
        },
        secret=row.get("secret"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def user_identity_to_dict(user: UserIdentity) -> Dict[str, Any]:
    """Convert UserIdentity to a users table dict.

    Args:
        user: UserIdentity domain model

    Returns:
        Dict suitable for database insertion/update
    """
    credential = user.local_credential
    return {
        "id": user.id,
        "username": credential.username.root if credential else None,
        "password_hash": (
            credential.password_hash.get_secret_value() if credential else None
        ),
        "password_salt": (
            credential.password_salt.get_secret_value() if credential else None
        ),
        "secret": user.secret,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def external_credentials_to_rows(user: UserIdentity) -> list[Dict[str, Any]]:
    """Convert a user's external credentials to external_credentials rows.

    Args:
        user: UserIdentity domain model

    Returns:
        One dict per linked provider
    """
    return [
        {
            "user_id": user.id,
            "provider": provider.value,
            "provider_user_id": provider_user_id,
            "created_at": user.created_at,
        }
        for provider, provider_user_id in user.external_credentials.items()
    ]


def row_to_session(row: Dict[str, Any]) -> Session:
    """Convert database row to Session domain model.

    Args:
        row: Database row as dict

    Returns:
        Session domain model
    """
    principal_id = row.get("principal_id")
    return Session(
        token=row["token"],
        principal_id=UserId(_uuid(principal_id)) if principal_id else None,
        created_at=row["created_at"],
        expires_at=row["expires_at"],
    )


def session_to_dict(session: Session) -> Dict[str, Any]:
    """Convert Session domain model to database dict.

    Args:
        session: Session domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return session.model_dump()
