"""Role hierarchy registry.

Roles are ranked in a fixed order (higher rank = more privileged). The
registry is read-only once built; reconfiguration means building a new one.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping

from accessgate.core.errors import PolicyConfigError


class DefaultRole(str, Enum):
    """Roles shipped with the dashboard (ordered by privilege)."""

    ADMIN = "admin"
    MANAGER = "manager"
    SUPERVISOR = "supervisor"
    BILLING = "billing"
    REPORTS = "reports"
    INVENTORY = "inventory"
    TECHNICIAN = "technician"
    DEPARTMENT = "department"
    STAFF = "staff"


DEFAULT_ROLE_RANKS: Mapping[str, int] = MappingProxyType(
    {
        DefaultRole.ADMIN.value: 100,
        DefaultRole.MANAGER.value: 80,
        DefaultRole.SUPERVISOR.value: 70,
        DefaultRole.BILLING.value: 60,
        DefaultRole.REPORTS.value: 60,
        DefaultRole.INVENTORY.value: 50,
        DefaultRole.TECHNICIAN.value: 40,
        DefaultRole.DEPARTMENT.value: 30,
        DefaultRole.STAFF.value: 20,
    }
)


class UnknownRoleError(KeyError):
    """Raised by ``RoleHierarchy.rank`` for a role that is not registered."""


class RoleHierarchy:
    """Immutable role -> rank table."""

    __slots__ = ("_ranks",)

    def __init__(self, ranks: Mapping[str, int]) -> None:
        if not ranks:
            raise PolicyConfigError("Role hierarchy must define at least one role.")
        table: dict[str, int] = {}
        for role, rank in ranks.items():
            if not isinstance(role, str) or not role.strip():
                raise PolicyConfigError(f"Invalid role name: {role!r}")
            # bool is an int subclass; a rank of True is almost certainly a typo.
            if isinstance(rank, bool) or not isinstance(rank, int):
                raise PolicyConfigError(f"Rank for role {role!r} must be an integer, got {rank!r}")
            table[role] = rank
        self._ranks: Mapping[str, int] = MappingProxyType(table)

    def rank(self, role: str) -> int:
        try:
            return self._ranks[role]
        except (KeyError, TypeError):
            raise UnknownRoleError(role) from None

    def is_known(self, role: str) -> bool:
        try:
            return role in self._ranks
        except TypeError:
            return False

    def has_minimum_role(self, role: str, minimum_role: str) -> bool:
        """True iff ``role`` ranks at or above ``minimum_role``.

        Unknown roles on either side deny.
        """
        try:
            return self.rank(role) >= self.rank(minimum_role)
        except UnknownRoleError:
            return False

    def roles(self) -> list[str]:
        """Registered roles, most privileged first (ties by name)."""
        return sorted(self._ranks, key=lambda r: (-self._ranks[r], r))

    def as_dict(self) -> dict[str, int]:
        return dict(self._ranks)

    def __contains__(self, role: object) -> bool:
        return isinstance(role, str) and role in self._ranks

    def __iter__(self) -> Iterator[str]:
        return iter(self.roles())

    def __len__(self) -> int:
        return len(self._ranks)

    def __repr__(self) -> str:
        return f"RoleHierarchy({self.as_dict()!r})"


def is_role_allowed(subject_role: str, allowed: frozenset[str] | set[str]) -> bool:
    """Default-deny exact-match check against an explicit allow set."""
    return subject_role in allowed
