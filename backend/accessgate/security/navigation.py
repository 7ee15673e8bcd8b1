"""Dashboard navigation entries, filtered per principal."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from accessgate.security.gate import AccessRequirement, Principal, is_granted
from accessgate.security.permissions import Feature
from accessgate.security.policy import AccessPolicy


@dataclass(frozen=True, slots=True)
class NavItem:
    name: str
    href: str
    feature: str

    @property
    def requirement(self) -> AccessRequirement:
        return AccessRequirement(feature=self.feature)


NAV_ITEMS: tuple[NavItem, ...] = (
    NavItem("Dashboard", "/", Feature.DASHBOARD.value),
    NavItem("Tasks", "/tasks", Feature.TASKS.value),
    NavItem("Inventory", "/inventory", Feature.INVENTORY.value),
    NavItem("Equipment", "/equipment", Feature.EQUIPMENT.value),
    NavItem("Departments", "/departments", Feature.DEPARTMENTS.value),
    NavItem("Process Configuration", "/process-config", Feature.PROCESSES.value),
    NavItem("User Management", "/users", Feature.USERS.value),
    NavItem("Billing & Cost Allocation", "/billing", Feature.BILLING.value),
    NavItem("Reports & Analytics", "/reports", Feature.REPORTS.value),
    NavItem("HMS Integration", "/hms-integration", Feature.HMS_INTEGRATION.value),
)


def visible_nav_items(
    principal: Optional[Principal],
    policy: Optional[AccessPolicy] = None,
    items: Sequence[NavItem] = NAV_ITEMS,
) -> list[NavItem]:
    # No principal, no menu.
    return [item for item in items if is_granted(principal, item.requirement, policy)]
