"""SQLAlchemy table definitions."""

from typing import Any

from sqlalchemy import JSON, Enum, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from identitygate.config import settings
from identitygate.db.base import Base
from identitygate.models.enums import KeyKind

# JSONB on PostgreSQL, plain JSON elsewhere
DocumentJSON = JSON().with_variant(JSONB(), "postgresql")


class RoleTable(Base):
    """Role documents."""

    __tablename__ = settings.roles_table

    # Identifier in stored string form; key_kind restores its type
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    key_kind: Mapped[KeyKind] = mapped_column(Enum(KeyKind), nullable=False)

    name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    normalized_name: Mapped[str | None] = mapped_column(String(256), nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # [{"type": ..., "value": ..., "issuer": ...}, ...]
    claims: Mapped[list[dict[str, Any]]] = mapped_column(DocumentJSON, nullable=False, default=list)

    __table_args__ = (
        Index(f"idx_{settings.roles_table}_normalized_name", "normalized_name", unique=True),
    )


class UserTable(Base):
    """User documents."""

    __tablename__ = settings.users_table

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    key_kind: Mapped[KeyKind] = mapped_column(Enum(KeyKind), nullable=False)

    user_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    normalized_user_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    normalized_email: Mapped[str | None] = mapped_column(String(256), nullable=True, index=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    claims: Mapped[list[dict[str, Any]]] = mapped_column(DocumentJSON, nullable=False, default=list)
    roles: Mapped[list[str]] = mapped_column(DocumentJSON, nullable=False, default=list)

    __table_args__ = (
        Index(
            f"idx_{settings.users_table}_normalized_user_name",
            "normalized_user_name",
            unique=True,
        ),
    )
