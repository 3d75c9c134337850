"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Alembic auto-generates migrations by comparing these models to the actual DB.

Key concepts:
- UUID primary keys (generic Uuid type, works on Postgres and SQLite)
- Unique constraints on owner_email and client_id enforced by the DB
- Access codes are hashed by a flush hook, never by callers
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String, Uuid, event, func, inspect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from tenantauth.auth.password import generate_client_id, hash_access_code


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


class Company(Base):
    """A registered tenant — the only entity in the system.

    Learn: access_code holds a bcrypt hash once the row is flushed.
    Assign the plaintext code and the before_insert / before_update
    hooks below replace it with its hash on save. The client secret
    is never stored; only its SHA-256 digest is.
    """

    __tablename__ = "companies"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=new_uuid
    )
    company_name: Mapped[str] = mapped_column(String(200), nullable=False)
    owner_name: Mapped[str] = mapped_column(String(200), nullable=False)
    roll_no: Mapped[str] = mapped_column(String(100), nullable=False)
    owner_email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    access_code: Mapped[str] = mapped_column(String(255), nullable=False)
    client_id: Mapped[str] = mapped_column(
        String(36), unique=True, nullable=False, index=True, default=generate_client_id
    )
    client_secret_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    refresh_token: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=utcnow
    )


@event.listens_for(Company, "before_insert")
def _hash_access_code_on_insert(mapper, connection, target: Company) -> None:
    target.access_code = hash_access_code(target.access_code)


@event.listens_for(Company, "before_update")
def _hash_access_code_on_update(mapper, connection, target: Company) -> None:
    # Only rehash when the code itself changed (login/logout touch other columns).
    if inspect(target).attrs.access_code.history.has_changes():
        target.access_code = hash_access_code(target.access_code)
