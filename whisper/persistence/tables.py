"""SQLAlchemy table definitions for Whisper.

These table definitions match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

metadata = MetaData()

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    # Local credential; all three are NULL for OAuth-only users
    Column("username", String(255), nullable=True),
    Column("password_hash", Text, nullable=True),
    Column("password_salt", String(128), nullable=True),
    Column("secret", Text, nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("username", name="uq_users_username"),
    CheckConstraint(
        "(username IS NULL) = (password_hash IS NULL) "
        "AND (username IS NULL) = (password_salt IS NULL)",
        name="ck_users_local_credential_complete",
    ),
)

# ============================================================================
# EXTERNAL CREDENTIALS TABLE (provider subject ids)
# ============================================================================
external_credentials_table = Table(
    "external_credentials",
    metadata,
    Column(
        "user_id",
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("provider", String(50), nullable=False),  # 'google', 'facebook'
    Column("provider_user_id", String(255), nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    PrimaryKeyConstraint("user_id", "provider", name="pk_external_credentials"),
    # Find-or-create relies on this constraint for atomicity
    UniqueConstraint("provider", "provider_user_id", name="uq_external_credential"),
)

# ============================================================================
# SESSIONS TABLE
# ============================================================================
sessions_table = Table(
    "sessions",
    metadata,
    Column("token", String(128), primary_key=True),
    Column(
        "principal_id",
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("created_at", TIMESTAMP(timezone=True), nullable=False),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
)

Index("idx_sessions_expires_at", sessions_table.c.expires_at)
