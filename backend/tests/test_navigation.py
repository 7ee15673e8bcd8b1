from __future__ import annotations

from accessgate.security.gate import Principal
from accessgate.security.navigation import NAV_ITEMS, visible_nav_items
from accessgate.security.policy import default_policy


def _hrefs(role: str | None) -> list[str]:
    principal = Principal(role=role) if role is not None else None
    return [item.href for item in visible_nav_items(principal, default_policy())]


def test_admin_sees_every_entry():
    assert _hrefs("admin") == [item.href for item in NAV_ITEMS]


def test_staff_sees_day_to_day_entries_only():
    assert _hrefs("staff") == ["/", "/tasks"]


def test_technician_menu():
    assert _hrefs("technician") == ["/", "/tasks", "/equipment"]


def test_manager_has_no_user_management():
    hrefs = _hrefs("manager")
    assert "/users" not in hrefs
    assert "/hms-integration" in hrefs


def test_no_principal_no_menu():
    assert _hrefs(None) == []


def test_unknown_role_no_menu():
    assert _hrefs("contractor") == []
