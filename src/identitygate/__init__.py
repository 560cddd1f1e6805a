"""IdentityGate - claim-holding roles and users with typed identifiers."""

from identitygate.claims import (
    add_claim,
    has_claim,
    remove_claim,
    remove_claims,
    replace_claim,
)
from identitygate.errors import ClaimRequiredError, IdentityGateError
from identitygate.keys import initialize_key
from identitygate.models import Claim, ClaimHolder, KeyKind, Role, StoredClaim, User

__version__ = "0.1.0"

__all__ = [
    "Claim",
    "ClaimHolder",
    "ClaimRequiredError",
    "IdentityGateError",
    "KeyKind",
    "Role",
    "StoredClaim",
    "User",
    "add_claim",
    "has_claim",
    "initialize_key",
    "remove_claim",
    "remove_claims",
    "replace_claim",
]
