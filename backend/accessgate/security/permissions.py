"""Permission matrix: which role may use which dashboard feature.

The matrix is independent of the role hierarchy. A higher-ranked role gets a
feature only if it is listed for that role.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

from accessgate.core.errors import PolicyConfigError
from accessgate.security.roles import DefaultRole, RoleHierarchy


class Feature(str, Enum):
    """Dashboard sections known to the default policy."""

    DASHBOARD = "dashboard"
    TASKS = "tasks"
    INVENTORY = "inventory"
    EQUIPMENT = "equipment"
    DEPARTMENTS = "departments"
    PROCESSES = "processes"
    USERS = "users"
    BILLING = "billing"
    REPORTS = "reports"
    SETTINGS = "settings"
    HMS_INTEGRATION = "hms-integration"


_F = Feature
DEFAULT_GRANTS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        DefaultRole.ADMIN.value: tuple(f.value for f in Feature),
        DefaultRole.MANAGER.value: tuple(
            f.value
            for f in Feature
            if f not in (_F.USERS, _F.SETTINGS)
        ),
        DefaultRole.SUPERVISOR.value: (
            _F.DASHBOARD.value,
            _F.TASKS.value,
            _F.INVENTORY.value,
            _F.EQUIPMENT.value,
            _F.DEPARTMENTS.value,
            _F.PROCESSES.value,
        ),
        DefaultRole.STAFF.value: (_F.DASHBOARD.value, _F.TASKS.value),
        DefaultRole.DEPARTMENT.value: (_F.DASHBOARD.value, _F.TASKS.value, _F.REPORTS.value),
        DefaultRole.INVENTORY.value: (
            _F.DASHBOARD.value,
            _F.TASKS.value,
            _F.INVENTORY.value,
            _F.EQUIPMENT.value,
        ),
        DefaultRole.TECHNICIAN.value: (_F.DASHBOARD.value, _F.TASKS.value, _F.EQUIPMENT.value),
        DefaultRole.BILLING.value: (_F.DASHBOARD.value, _F.TASKS.value, _F.BILLING.value, _F.REPORTS.value),
        DefaultRole.REPORTS.value: (_F.DASHBOARD.value, _F.TASKS.value, _F.REPORTS.value),
    }
)


class PermissionMatrix:
    """Immutable role -> feature-set table validated against a hierarchy."""

    __slots__ = ("_grants", "_by_feature")

    def __init__(self, grants: Mapping[str, Iterable[str]], hierarchy: RoleHierarchy) -> None:
        table: dict[str, frozenset[str]] = {}
        by_feature: dict[str, set[str]] = {}
        for role, features in grants.items():
            if role not in hierarchy:
                raise PolicyConfigError(f"Permission matrix references unknown role {role!r}")
            if isinstance(features, str):
                raise PolicyConfigError(f"Features for role {role!r} must be a list, not a string")
            feature_set = frozenset(features)
            for feature in feature_set:
                if not isinstance(feature, str) or not feature.strip():
                    raise PolicyConfigError(f"Invalid feature {feature!r} for role {role!r}")
                by_feature.setdefault(feature, set()).add(role)
            table[role] = feature_set
        self._grants: Mapping[str, frozenset[str]] = MappingProxyType(table)
        self._by_feature: Mapping[str, frozenset[str]] = MappingProxyType(
            {feature: frozenset(roles) for feature, roles in by_feature.items()}
        )

    def has_permission(self, role: str, feature: str) -> bool:
        """Default-deny: unknown role or unlisted feature is simply not permitted."""
        return feature in self.accessible_features(role)

    def accessible_features(self, role: str) -> frozenset[str]:
        try:
            return self._grants.get(role, frozenset())
        except TypeError:
            return frozenset()

    def roles_for_feature(self, feature: str) -> frozenset[str]:
        try:
            return self._by_feature.get(feature, frozenset())
        except TypeError:
            return frozenset()

    def features(self) -> frozenset[str]:
        return frozenset(self._by_feature)

    def as_dict(self) -> dict[str, list[str]]:
        return {role: sorted(features) for role, features in self._grants.items()}

    def __repr__(self) -> str:
        return f"PermissionMatrix({self.as_dict()!r})"
