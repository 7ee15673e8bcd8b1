from __future__ import annotations

import itertools

import pytest

from accessgate.core.errors import PolicyConfigError
from accessgate.security.roles import DEFAULT_ROLE_RANKS, DefaultRole, RoleHierarchy, UnknownRoleError
from conftest import EXAMPLE_RANKS


@pytest.fixture()
def hierarchy() -> RoleHierarchy:
    return RoleHierarchy(EXAMPLE_RANKS)


@pytest.mark.parametrize("role", sorted(EXAMPLE_RANKS))
def test_minimum_role_is_reflexive(hierarchy: RoleHierarchy, role: str):
    assert hierarchy.has_minimum_role(role, role)


def test_minimum_role_follows_rank_order(hierarchy: RoleHierarchy):
    for r1, r2 in itertools.product(EXAMPLE_RANKS, repeat=2):
        expected = EXAMPLE_RANKS[r1] >= EXAMPLE_RANKS[r2]
        assert hierarchy.has_minimum_role(r1, r2) is expected, (r1, r2)


def test_unknown_role_never_satisfies_a_minimum(hierarchy: RoleHierarchy):
    for minimum in EXAMPLE_RANKS:
        assert not hierarchy.has_minimum_role("intruder", minimum)


def test_unknown_minimum_role_denies(hierarchy: RoleHierarchy):
    assert not hierarchy.has_minimum_role("admin", "superuser")


def test_rank_raises_controlled_error_for_unknown_role(hierarchy: RoleHierarchy):
    with pytest.raises(UnknownRoleError):
        hierarchy.rank("intruder")
    assert hierarchy.rank("manager") == 2


def test_roles_listed_most_privileged_first(hierarchy: RoleHierarchy):
    assert hierarchy.roles() == ["admin", "manager", "staff", "guest"]
    assert list(hierarchy) == hierarchy.roles()
    assert len(hierarchy) == 4
    assert "staff" in hierarchy and "intruder" not in hierarchy


def test_registry_is_read_only(hierarchy: RoleHierarchy):
    ranks = {"a": 1}
    h = RoleHierarchy(ranks)
    ranks["b"] = 2
    assert not h.is_known("b")
    exported = hierarchy.as_dict()
    exported["guest"] = 99
    assert hierarchy.rank("guest") == 0


def test_equal_ranks_satisfy_each_other():
    h = RoleHierarchy(DEFAULT_ROLE_RANKS)
    assert h.has_minimum_role(DefaultRole.BILLING.value, DefaultRole.REPORTS.value)
    assert h.has_minimum_role(DefaultRole.REPORTS.value, DefaultRole.BILLING.value)
    assert not h.has_minimum_role(DefaultRole.STAFF.value, DefaultRole.DEPARTMENT.value)


@pytest.mark.parametrize(
    "ranks",
    [
        {},
        {"": 1},
        {"admin": "high"},
        {"admin": True},
        {"admin": 1.5},
    ],
)
def test_invalid_tables_rejected(ranks):
    with pytest.raises(PolicyConfigError):
        RoleHierarchy(ranks)
