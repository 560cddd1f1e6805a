"""
Claim set operations on a ClaimHolder.

Claims are matched on (type, value); the issuer is never part of the match.
add_claim is the only place that enforces uniqueness. All operations mutate
holder.claims in place and report "nothing to do" as False rather than
raising.
"""

from typing import Iterable, Optional

from identitygate.errors import ClaimRequiredError
from identitygate.models.claim import Claim, to_stored_claim
from identitygate.models.principal import ClaimHolder


def has_claim(holder: ClaimHolder, claim: Claim) -> bool:
    """Return True if the holder has a claim with the same type and value."""
    return any(stored.matches(claim) for stored in holder.claims)


def add_claim(holder: ClaimHolder, claim: Optional[Claim]) -> bool:
    """Append a claim unless one with the same type and value is present."""
    if claim is None:
        raise ClaimRequiredError("claim")

    if has_claim(holder, claim):
        return False

    holder.claims.append(to_stored_claim(claim))
    return True


def replace_claim(holder: ClaimHolder, claim: Claim, new_claim: Claim) -> bool:
    """
    Overwrite every entry matching claim with new_claim's fields, in place.

    Entries keep their position. If several entries match they are all
    rewritten, which can leave duplicates behind; no deduplication is done.
    """
    replaced = False
    for stored in [c for c in holder.claims if c.matches(claim)]:
        stored.type = new_claim.type
        stored.value = new_claim.value
        stored.issuer = new_claim.issuer
        replaced = True
    return replaced


def remove_claim(holder: ClaimHolder, claim: Optional[Claim]) -> bool:
    """Remove the first entry matching claim."""
    if claim is None:
        raise ClaimRequiredError("claim")

    for index, stored in enumerate(holder.claims):
        if stored.matches(claim):
            del holder.claims[index]
            return True
    return False


def remove_claims(holder: ClaimHolder, claims: Iterable[Claim]) -> bool:
    """Remove all entries matching any of claims. True if anything was removed."""
    removed = False
    for claim in claims:
        kept = [stored for stored in holder.claims if not stored.matches(claim)]
        if len(kept) != len(holder.claims):
            holder.claims[:] = kept
            removed = True
    return removed
