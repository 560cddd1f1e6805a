"""
Claim set operation tests: uniqueness on (type, value), in-place replace,
first-match and batch removal.
"""

import pytest

from identitygate.claims import (
    add_claim,
    has_claim,
    remove_claim,
    remove_claims,
    replace_claim,
)
from identitygate.errors import ClaimRequiredError
from identitygate.models import Claim, ClaimHolder, Role, StoredClaim, User


@pytest.fixture
def role() -> Role:
    return Role.create("admins")


def test_add_same_type_and_value_twice(role: Role):
    """Second add with equal (type, value) is rejected and changes nothing."""
    claim = Claim(type="role", value="admin", issuer="sys")

    assert add_claim(role, claim) is True
    assert len(role.claims) == 1

    snapshot = [c.model_copy() for c in role.claims]
    assert add_claim(role, claim) is False
    assert role.claims == snapshot


def test_issuer_is_ignored_when_matching(role: Role):
    add_claim(role, Claim(type="role", value="admin", issuer="sys"))

    assert add_claim(role, Claim(type="role", value="admin", issuer="other")) is False
    assert role.claims == [StoredClaim(type="role", value="admin", issuer="sys")]
    assert has_claim(role, Claim(type="role", value="admin")) is True


def test_add_none_raises(role: Role):
    with pytest.raises(ClaimRequiredError) as exc_info:
        add_claim(role, None)
    assert exc_info.value.code == "CLAIM_REQUIRED"
    assert isinstance(exc_info.value, ValueError)
    assert role.claims == []


def test_has_claim_follows_add_and_remove(role: Role):
    claim = Claim(type="scope", value="read")
    assert has_claim(role, claim) is False

    add_claim(role, claim)
    assert has_claim(role, claim) is True

    assert remove_claim(role, claim) is True
    assert has_claim(role, claim) is False


def test_add_drops_value_type(role: Role):
    add_claim(role, Claim(type="age", value="42", value_type="integer"))

    assert role.claims[0] == StoredClaim(type="age", value="42", issuer=None)
    assert role.claims[0].to_claim().value_type is None


def test_insertion_order_is_preserved(role: Role):
    for value in ("a", "b", "c"):
        add_claim(role, Claim(type="t", value=value))

    assert [c.value for c in role.claims] == ["a", "b", "c"]


def test_example_scenario(role: Role):
    """Add, rejected duplicate add, then replace."""
    assert add_claim(role, Claim(type="role", value="admin", issuer="sys")) is True
    assert add_claim(role, Claim(type="role", value="admin", issuer="other")) is False

    replaced = replace_claim(
        role,
        Claim(type="role", value="admin"),
        Claim(type="role", value="superadmin", issuer="sys"),
    )

    assert replaced is True
    assert role.claims == [StoredClaim(type="role", value="superadmin", issuer="sys")]


def test_replace_keeps_entry_identity_and_position(role: Role):
    add_claim(role, Claim(type="t", value="first"))
    add_claim(role, Claim(type="t", value="second"))
    add_claim(role, Claim(type="t", value="third"))
    entry = role.claims[1]

    assert replace_claim(role, Claim(type="t", value="second"), Claim(type="u", value="new", issuer="x"))

    assert role.claims[1] is entry
    assert (entry.type, entry.value, entry.issuer) == ("u", "new", "x")
    assert [c.value for c in role.claims] == ["first", "new", "third"]


def test_replace_without_match_returns_false(role: Role):
    add_claim(role, Claim(type="t", value="v"))

    assert replace_claim(role, Claim(type="t", value="missing"), Claim(type="t", value="w")) is False
    assert role.claims == [StoredClaim(type="t", value="v")]


def test_replace_rewrites_every_match_even_into_duplicates():
    """
    Multiple entries matching the old claim are all rewritten. The result can
    hold duplicates; replace does not deduplicate.
    """
    role = Role.create("legacy")
    # Loaded documents may already hold duplicates; add_claim is bypassed here.
    role.claims.extend([
        StoredClaim(type="role", value="admin", issuer="a"),
        StoredClaim(type="role", value="admin", issuer="b"),
        StoredClaim(type="other", value="keep"),
    ])

    replaced = replace_claim(
        role,
        Claim(type="role", value="admin"),
        Claim(type="role", value="owner", issuer="sys"),
    )

    assert replaced is True
    assert role.claims == [
        StoredClaim(type="role", value="owner", issuer="sys"),
        StoredClaim(type="role", value="owner", issuer="sys"),
        StoredClaim(type="other", value="keep"),
    ]


def test_remove_on_empty_or_unmatched_holder(role: Role):
    assert remove_claim(role, Claim(type="t", value="v")) is False
    assert role.claims == []

    add_claim(role, Claim(type="t", value="v"))
    assert remove_claim(role, Claim(type="t", value="other")) is False
    assert role.claims == [StoredClaim(type="t", value="v")]


def test_remove_none_raises(role: Role):
    with pytest.raises(ClaimRequiredError):
        remove_claim(role, None)


def test_remove_takes_only_first_match():
    role = Role.create("legacy")
    role.claims.extend([
        StoredClaim(type="t", value="v", issuer="a"),
        StoredClaim(type="t", value="v", issuer="b"),
    ])

    assert remove_claim(role, Claim(type="t", value="v")) is True
    assert role.claims == [StoredClaim(type="t", value="v", issuer="b")]


def test_remove_claims_partial_batch(role: Role):
    """Only c1 present: c1 removed, others untouched, result True."""
    add_claim(role, Claim(type="t", value="c1"))
    add_claim(role, Claim(type="t", value="keep"))

    removed = remove_claims(role, [Claim(type="t", value="c1"), Claim(type="t", value="c2")])

    assert removed is True
    assert role.claims == [StoredClaim(type="t", value="keep")]


def test_remove_claims_removes_all_matches_in_place():
    role = Role.create("legacy")
    claims_list = role.claims
    claims_list.extend([
        StoredClaim(type="t", value="v", issuer="a"),
        StoredClaim(type="x", value="y"),
        StoredClaim(type="t", value="v", issuer="b"),
    ])

    assert remove_claims(role, iter([Claim(type="t", value="v")])) is True
    assert role.claims is claims_list
    assert role.claims == [StoredClaim(type="x", value="y")]


def test_remove_claims_nothing_matched(role: Role):
    add_claim(role, Claim(type="t", value="v"))

    assert remove_claims(role, [Claim(type="t", value="nope")]) is False
    assert remove_claims(role, []) is False
    assert len(role.claims) == 1


def test_operations_work_for_users_too():
    user = User.create("alice")
    assert isinstance(user, ClaimHolder)

    assert add_claim(user, Claim(type="email_verified", value="true")) is True
    assert has_claim(user, Claim(type="email_verified", value="true")) is True
    assert remove_claims(user, [Claim(type="email_verified", value="true")]) is True
    assert user.claims == []
