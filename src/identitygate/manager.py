"""IdentityGate manager - role, user and claim administration."""

import logging
from typing import Iterable, Optional, Union
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from identitygate.claims import (
    add_claim,
    has_claim,
    remove_claim,
    remove_claims,
    replace_claim,
)
from identitygate.config import settings
from identitygate.db.repositories import RoleRepository, UserRepository
from identitygate.errors import ClaimRequiredError, RoleNotFound, UserNotFound
from identitygate.keys import RandomSource, coerce_key, format_key
from identitygate.models import Claim, KeyKind, Role, User
from identitygate.principals import normalize_name

logger = logging.getLogger(__name__)

KeyValue = Union[UUID, int, str]


class IdentityManager:
    """
    Administration workflows over stored roles and users.

    Mutating calls apply a claim set operation to the principal passed in and
    persist the document only when the operation reports a change. The
    boolean result is passed through.
    """

    def __init__(self, session: AsyncSession, random_source: Optional[RandomSource] = None):
        self.session = session
        self.roles = RoleRepository(session)
        self.users = UserRepository(session)
        self.random_source = random_source

    # =========================================================================
    # Roles
    # =========================================================================

    async def create_role(
        self,
        name: str,
        key: Optional[KeyValue] = None,
        key_kind: Optional[KeyKind] = None,
    ) -> Role:
        """Create and persist a new role."""
        kind = key_kind or settings.default_key_kind
        role = Role.create(
            name=name,
            key=coerce_key(kind, key) if key is not None else None,
            key_kind=kind,
            random_source=self.random_source,
        )
        created = await self.roles.create(role)
        logger.info(f"Role created: {created.name} ({created.key}, {kind.value})")
        return created

    async def get_role(self, role_id: KeyValue) -> Role:
        """Get a role or raise RoleNotFound."""
        role = await self.roles.get(role_id)
        if role is None:
            raise RoleNotFound(format_key(role_id))
        return role

    async def find_role_by_name(self, name: str) -> Role | None:
        return await self.roles.get_by_name(name)

    async def rename_role(self, role: Role, name: str) -> Role:
        """Rename a role, keeping the normalized name in step."""
        role.name = name
        role.normalized_name = normalize_name(name)
        return await self._save_role(role)

    async def delete_role(self, role: Role) -> bool:
        deleted = await self.roles.delete(role.id)
        if deleted:
            logger.info(f"Role deleted: {role.name} ({role.key})")
        return deleted

    def get_role_claims(self, role: Role) -> list[Claim]:
        return [stored.to_claim() for stored in role.claims]

    async def add_role_claim(self, role: Role, claim: Claim) -> bool:
        """Add a claim to a role. Returns False for a duplicate (type, value)."""
        if not add_claim(role, claim):
            logger.debug(f"Duplicate claim {claim.type}={claim.value} ignored for role {role.key}")
            return False
        await self._save_role(role)
        logger.info(f"Claim {claim.type}={claim.value} added to role {role.key}")
        return True

    async def replace_role_claim(self, role: Role, claim: Claim, new_claim: Claim) -> bool:
        if not replace_claim(role, claim, new_claim):
            return False
        await self._save_role(role)
        logger.info(
            f"Claim {claim.type}={claim.value} replaced with "
            f"{new_claim.type}={new_claim.value} on role {role.key}"
        )
        return True

    async def remove_role_claim(self, role: Role, claim: Claim) -> bool:
        if not remove_claim(role, claim):
            return False
        await self._save_role(role)
        logger.info(f"Claim {claim.type}={claim.value} removed from role {role.key}")
        return True

    async def remove_role_claims(self, role: Role, claims: Iterable[Claim]) -> bool:
        if not remove_claims(role, claims):
            return False
        await self._save_role(role)
        logger.info(f"Claims removed from role {role.key}")
        return True

    async def _save_role(self, role: Role) -> Role:
        saved = await self.roles.update(role)
        if saved is None:
            raise RoleNotFound(role.key or "")
        return saved

    # =========================================================================
    # Users
    # =========================================================================

    async def create_user(
        self,
        user_name: str,
        email: Optional[str] = None,
        key: Optional[KeyValue] = None,
        key_kind: Optional[KeyKind] = None,
    ) -> User:
        """Create and persist a new user."""
        kind = key_kind or settings.default_key_kind
        user = User.create(
            user_name=user_name,
            key=coerce_key(kind, key) if key is not None else None,
            key_kind=kind,
            random_source=self.random_source,
            email=email,
        )
        created = await self.users.create(user)
        logger.info(f"User created: {created.user_name} ({created.key}, {kind.value})")
        return created

    async def get_user(self, user_id: KeyValue) -> User:
        """Get a user or raise UserNotFound."""
        user = await self.users.get(user_id)
        if user is None:
            raise UserNotFound(format_key(user_id))
        return user

    async def find_user_by_name(self, user_name: str) -> User | None:
        return await self.users.get_by_name(user_name)

    async def delete_user(self, user: User) -> bool:
        deleted = await self.users.delete(user.id)
        if deleted:
            logger.info(f"User deleted: {user.user_name} ({user.key})")
        return deleted

    def get_user_claims(self, user: User) -> list[Claim]:
        return [stored.to_claim() for stored in user.claims]

    def user_has_claim(self, user: User, claim: Claim) -> bool:
        return has_claim(user, claim)

    async def add_user_claims(self, user: User, claims: Iterable[Claim]) -> bool:
        """
        Add claims to a user, skipping duplicates. True if any was added.

        A batch containing None is rejected before the user is touched.
        """
        batch = list(claims)
        if any(claim is None for claim in batch):
            raise ClaimRequiredError("claims")

        added = False
        for claim in batch:
            if add_claim(user, claim):
                added = True
            else:
                logger.debug(
                    f"Duplicate claim {claim.type}={claim.value} ignored for user {user.key}"
                )
        if added:
            await self._save_user(user)
            logger.info(f"Claims added to user {user.key}")
        return added

    async def replace_user_claim(self, user: User, claim: Claim, new_claim: Claim) -> bool:
        if not replace_claim(user, claim, new_claim):
            return False
        await self._save_user(user)
        logger.info(
            f"Claim {claim.type}={claim.value} replaced with "
            f"{new_claim.type}={new_claim.value} on user {user.key}"
        )
        return True

    async def remove_user_claims(self, user: User, claims: Iterable[Claim]) -> bool:
        if not remove_claims(user, claims):
            return False
        await self._save_user(user)
        logger.info(f"Claims removed from user {user.key}")
        return True

    # =========================================================================
    # Role membership
    # =========================================================================

    async def add_to_role(self, user: User, role: Role) -> bool:
        """Add a user to a role. Returns False if already a member."""
        if not user.add_role(role.id):
            return False
        await self._save_user(user)
        logger.info(f"User {user.key} added to role {role.name}")
        return True

    async def remove_from_role(self, user: User, role: Role) -> bool:
        """Remove a user from a role. Returns False if not a member."""
        if not user.remove_role(role.id):
            return False
        await self._save_user(user)
        logger.info(f"User {user.key} removed from role {role.name}")
        return True

    def is_in_role(self, user: User, role: Role) -> bool:
        return user.is_in_role(role.id)

    async def _save_user(self, user: User) -> User:
        saved = await self.users.update(user)
        if saved is None:
            raise UserNotFound(user.key or "")
        return saved
