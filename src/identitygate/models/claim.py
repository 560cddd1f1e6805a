"""Claim models - assertions attached to a principal."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class Claim(BaseModel):
    """A (type, value, issuer) assertion as handed over by callers."""

    model_config = ConfigDict(frozen=True)

    type: str
    value: str
    issuer: Optional[str] = None
    value_type: Optional[str] = None

    def to_stored(self) -> "StoredClaim":
        """Convert to the persisted form (value_type is dropped)."""
        return to_stored_claim(self)


class StoredClaim(BaseModel):
    """Claim as held inside a principal's claim list."""

    type: str
    value: str
    issuer: Optional[str] = None

    def matches(self, claim: "Claim | StoredClaim") -> bool:
        """Check if claim has the same type and value (issuer ignored)."""
        return self.type == claim.type and self.value == claim.value

    def to_claim(self) -> Claim:
        """Convert back to the external form."""
        return to_claim(self)


def to_stored_claim(claim: Claim) -> StoredClaim:
    """Copy type, value and issuer into a new StoredClaim."""
    return StoredClaim(type=claim.type, value=claim.value, issuer=claim.issuer)


def to_claim(stored: StoredClaim) -> Claim:
    """Copy type, value and issuer into a new Claim. value_type is not inferred."""
    return Claim(type=stored.type, value=stored.value, issuer=stored.issuer, value_type=None)
