"""IdentityGate data models."""

from identitygate.models.enums import KeyKind
from identitygate.models.claim import Claim, StoredClaim, to_claim, to_stored_claim
from identitygate.models.principal import ClaimHolder, Role, User

__all__ = [
    "Claim",
    "ClaimHolder",
    "KeyKind",
    "Role",
    "StoredClaim",
    "User",
    "to_claim",
    "to_stored_claim",
]
