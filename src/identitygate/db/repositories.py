"""Database repositories for role and user documents."""

from typing import Any, Union
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from identitygate.db.tables import RoleTable, UserTable
from identitygate.errors import DuplicatePrincipalError, MissingKeyError
from identitygate.keys import format_key, parse_key, validate_key
from identitygate.models import Role, StoredClaim, User
from identitygate.principals import normalize_name

KeyValue = Union[UUID, int, str]


def _dump_claims(claims: list[StoredClaim]) -> list[dict[str, Any]]:
    return [claim.model_dump() for claim in claims]


def _load_claims(raw: list[dict[str, Any]] | None) -> list[StoredClaim]:
    return [StoredClaim.model_validate(item) for item in raw or []]


class RoleRepository:
    """Repository for role documents."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, role: Role) -> Role:
        """
        Insert a new role document.

        Relies on the primary key and the unique normalized-name index
        instead of check-then-insert.
        """
        if role.id is None:
            raise MissingKeyError("Role", role.key_kind.value)
        validate_key(role.key_kind, role.id)

        row = RoleTable(
            id=format_key(role.id),
            key_kind=role.key_kind,
            name=role.name,
            normalized_name=role.normalized_name,
            version=role.version,
            claims=_dump_claims(role.claims),
        )
        self.session.add(row)

        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            raise DuplicatePrincipalError("Role", role.name or format_key(role.id)) from None
        return self._row_to_model(row)

    async def get(self, role_id: KeyValue) -> Role | None:
        """Get a role by identifier."""
        result = await self.session.execute(
            select(RoleTable).where(RoleTable.id == format_key(role_id))
        )
        row = result.scalar_one_or_none()
        return self._row_to_model(row) if row else None

    async def get_by_name(self, name: str) -> Role | None:
        """Get a role by name (normalized before lookup)."""
        result = await self.session.execute(
            select(RoleTable).where(RoleTable.normalized_name == normalize_name(name))
        )
        row = result.scalar_one_or_none()
        return self._row_to_model(row) if row else None

    async def update(self, role: Role) -> Role | None:
        """Replace the stored document with the role's current state."""
        if role.id is None:
            raise MissingKeyError("Role", role.key_kind.value)

        try:
            result = await self.session.execute(
                update(RoleTable)
                .where(RoleTable.id == format_key(role.id))
                .values(
                    name=role.name,
                    normalized_name=role.normalized_name,
                    version=role.version,
                    claims=_dump_claims(role.claims),
                )
            )
        except IntegrityError:
            await self.session.rollback()
            raise DuplicatePrincipalError("Role", role.name or format_key(role.id)) from None

        if result.rowcount == 0:
            return None
        return await self.get(role.id)

    async def delete(self, role_id: KeyValue) -> bool:
        """Delete a role. Returns False if it did not exist."""
        result = await self.session.execute(
            delete(RoleTable).where(RoleTable.id == format_key(role_id))
        )
        return result.rowcount > 0

    def _row_to_model(self, row: RoleTable) -> Role:
        """Convert database row to model."""
        return Role(
            id=parse_key(row.key_kind, row.id),
            key_kind=row.key_kind,
            name=row.name,
            normalized_name=row.normalized_name,
            version=row.version,
            claims=_load_claims(row.claims),
        )


class UserRepository:
    """Repository for user documents."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: User) -> User:
        """Insert a new user document."""
        if user.id is None:
            raise MissingKeyError("User", user.key_kind.value)
        validate_key(user.key_kind, user.id)

        row = UserTable(
            id=format_key(user.id),
            key_kind=user.key_kind,
            user_name=user.user_name,
            normalized_user_name=user.normalized_user_name,
            email=user.email,
            normalized_email=user.normalized_email,
            version=user.version,
            claims=_dump_claims(user.claims),
            roles=list(user.roles),
        )
        self.session.add(row)

        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            raise DuplicatePrincipalError("User", user.user_name or format_key(user.id)) from None
        return self._row_to_model(row)

    async def get(self, user_id: KeyValue) -> User | None:
        """Get a user by identifier."""
        result = await self.session.execute(
            select(UserTable).where(UserTable.id == format_key(user_id))
        )
        row = result.scalar_one_or_none()
        return self._row_to_model(row) if row else None

    async def get_by_name(self, user_name: str) -> User | None:
        """Get a user by user name (normalized before lookup)."""
        result = await self.session.execute(
            select(UserTable).where(UserTable.normalized_user_name == normalize_name(user_name))
        )
        row = result.scalar_one_or_none()
        return self._row_to_model(row) if row else None

    async def update(self, user: User) -> User | None:
        """Replace the stored document with the user's current state."""
        if user.id is None:
            raise MissingKeyError("User", user.key_kind.value)

        try:
            result = await self.session.execute(
                update(UserTable)
                .where(UserTable.id == format_key(user.id))
                .values(
                    user_name=user.user_name,
                    normalized_user_name=user.normalized_user_name,
                    email=user.email,
                    normalized_email=user.normalized_email,
                    version=user.version,
                    claims=_dump_claims(user.claims),
                    roles=list(user.roles),
                )
            )
        except IntegrityError:
            await self.session.rollback()
            raise DuplicatePrincipalError("User", user.user_name or format_key(user.id)) from None

        if result.rowcount == 0:
            return None
        return await self.get(user.id)

    async def delete(self, user_id: KeyValue) -> bool:
        """Delete a user. Returns False if it did not exist."""
        result = await self.session.execute(
            delete(UserTable).where(UserTable.id == format_key(user_id))
        )
        return result.rowcount > 0

    def _row_to_model(self, row: UserTable) -> User:
        """Convert database row to model."""
        return User(
            id=parse_key(row.key_kind, row.id),
            key_kind=row.key_kind,
            user_name=row.user_name,
            normalized_user_name=row.normalized_user_name,
            email=row.email,
            normalized_email=row.normalized_email,
            version=row.version,
            claims=_load_claims(row.claims),
            roles=list(row.roles or []),
        )
