"""Principal models - roles and users that own claims."""

from typing import Optional, Protocol, Union, runtime_checkable
from uuid import UUID

from pydantic import BaseModel, Field

from identitygate.keys import RandomSource, coerce_key, format_key, initialize_key
from identitygate.models.claim import StoredClaim
from identitygate.models.enums import KeyKind
from identitygate.principals import normalize_email, normalize_name

SCHEMA_VERSION = 1


@runtime_checkable
class ClaimHolder(Protocol):
    """Anything exposing a mutable, ordered list of stored claims."""

    claims: list[StoredClaim]


class Role(BaseModel):
    """Role document."""

    id: Optional[Union[UUID, int, str]] = None
    key_kind: KeyKind = KeyKind.GUID
    name: Optional[str] = None
    normalized_name: Optional[str] = None

    # Schema version of the stored document
    version: int = SCHEMA_VERSION

    claims: list[StoredClaim] = Field(default_factory=list)

    @classmethod
    def create(
        cls,
        name: Optional[str] = None,
        key: Optional[Union[UUID, int, str]] = None,
        key_kind: KeyKind = KeyKind.GUID,
        random_source: Optional[RandomSource] = None,
    ) -> "Role":
        """
        Construct a new role with a generated (or explicit) identifier and no claims.

        An explicit key may be typed or in stored string form; it must fit
        key_kind or InvalidKeyError is raised.
        """
        role_id = initialize_key(key_kind, random_source)
        if key is not None:
            role_id = coerce_key(key_kind, key)
        return cls(
            id=role_id,
            key_kind=key_kind,
            name=name,
            normalized_name=normalize_name(name),
        )

    @property
    def key(self) -> Optional[str]:
        """Stored string form of the identifier."""
        return format_key(self.id) if self.id is not None else None


class User(BaseModel):
    """User document."""

    id: Optional[Union[UUID, int, str]] = None
    key_kind: KeyKind = KeyKind.GUID
    user_name: Optional[str] = None
    normalized_user_name: Optional[str] = None
    email: Optional[str] = None
    normalized_email: Optional[str] = None

    # Schema version of the stored document
    version: int = SCHEMA_VERSION

    claims: list[StoredClaim] = Field(default_factory=list)

    # Role identifiers in stored string form
    roles: list[str] = Field(default_factory=list)

    @classmethod
    def create(
        cls,
        user_name: Optional[str] = None,
        key: Optional[Union[UUID, int, str]] = None,
        key_kind: KeyKind = KeyKind.GUID,
        random_source: Optional[RandomSource] = None,
        email: Optional[str] = None,
    ) -> "User":
        """Construct a new user with a generated (or explicit) identifier and no claims."""
        user_id = initialize_key(key_kind, random_source)
        if key is not None:
            user_id = coerce_key(key_kind, key)
        return cls(
            id=user_id,
            key_kind=key_kind,
            user_name=user_name,
            normalized_user_name=normalize_name(user_name),
            email=email,
            normalized_email=normalize_email(email),
        )

    @property
    def key(self) -> Optional[str]:
        """Stored string form of the identifier."""
        return format_key(self.id) if self.id is not None else None

    def is_in_role(self, role_id: Union[UUID, int, str]) -> bool:
        """Check if the user is a member of a role."""
        return format_key(role_id) in self.roles

    def add_role(self, role_id: Union[UUID, int, str]) -> bool:
        """Add a role membership. Returns False if already a member."""
        if self.is_in_role(role_id):
            return False
        self.roles.append(format_key(role_id))
        return True

    def remove_role(self, role_id: Union[UUID, int, str]) -> bool:
        """Remove a role membership. Returns False if not a member."""
        if not self.is_in_role(role_id):
            return False
        self.roles.remove(format_key(role_id))
        return True
