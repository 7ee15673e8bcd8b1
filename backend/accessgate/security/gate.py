"""Access gate evaluator.

A protected region declares an ``AccessRequirement``; the gate checks it
against the current ``Principal`` and the active policy. Every criterion that
is present must pass (AND). Nothing here raises for well-typed input: unknown
roles and features are ordinary denials.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, TypeVar

from accessgate.security.policy import AccessPolicy, get_policy
from accessgate.security.roles import is_role_allowed


logger = logging.getLogger("accessgate.gate")

T = TypeVar("T")
F = TypeVar("F")


@dataclass(frozen=True, slots=True)
class Principal:
    """Evaluating subject, reduced to its role. ``None`` stands for unauthenticated."""

    role: str
    sub: Optional[str] = None


def _as_role_set(roles: Optional[Iterable[str]]) -> Optional[frozenset[str]]:
    if roles is None:
        return None
    if isinstance(roles, str):
        return frozenset((roles,))
    return frozenset(roles)


@dataclass(frozen=True, slots=True)
class AccessRequirement:
    """Declarative bundle of optional checks.

    ``allowed_roles=[]`` (present but empty) imposes no restriction; it is
    treated exactly like ``allowed_roles=None``. Empty strings for
    ``feature``/``minimum_role`` are likewise treated as unset.
    """

    feature: Optional[str] = None
    minimum_role: Optional[str] = None
    allowed_roles: Optional[frozenset[str]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "allowed_roles", _as_role_set(self.allowed_roles))

    @property
    def is_open(self) -> bool:
        """True when no criterion restricts access (authentication alone suffices)."""
        return not (self.feature or self.minimum_role or self.allowed_roles)


class DecisionReason(str, Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FEATURE_DENIED = "FEATURE_DENIED"
    ROLE_TOO_LOW = "ROLE_TOO_LOW"
    ROLE_NOT_ALLOWED = "ROLE_NOT_ALLOWED"
    GRANTED = "GRANTED"


@dataclass(frozen=True, slots=True)
class Decision:
    granted: bool
    reason: DecisionReason

    def __bool__(self) -> bool:
        return self.granted


GRANT = Decision(granted=True, reason=DecisionReason.GRANTED)
UNAUTHENTICATED = Decision(granted=False, reason=DecisionReason.UNAUTHENTICATED)


def evaluate(
    principal: Optional[Principal],
    requirement: AccessRequirement,
    policy: Optional[AccessPolicy] = None,
) -> Decision:
    """Decide whether ``principal`` satisfies ``requirement``.

    The reason names the first failing criterion in the order feature,
    minimum role, allowed roles. The grant/deny outcome does not depend on
    that order.
    """
    if principal is None:
        _trace(None, requirement, UNAUTHENTICATED)
        return UNAUTHENTICATED

    policy = policy or get_policy()
    role = principal.role
    failures: list[DecisionReason] = []

    if requirement.feature and not policy.permissions.has_permission(role, requirement.feature):
        failures.append(DecisionReason.FEATURE_DENIED)
    if requirement.minimum_role and not policy.hierarchy.has_minimum_role(role, requirement.minimum_role):
        failures.append(DecisionReason.ROLE_TOO_LOW)
    if requirement.allowed_roles and not (
        policy.hierarchy.is_known(role) and is_role_allowed(role, requirement.allowed_roles)
    ):
        failures.append(DecisionReason.ROLE_NOT_ALLOWED)

    decision = GRANT if not failures else Decision(granted=False, reason=failures[0])
    _trace(principal, requirement, decision)
    return decision


def is_granted(
    principal: Optional[Principal],
    requirement: AccessRequirement,
    policy: Optional[AccessPolicy] = None,
) -> bool:
    return evaluate(principal, requirement, policy).granted


def gate(
    principal: Optional[Principal],
    requirement: AccessRequirement,
    content: T,
    fallback: F = None,
    policy: Optional[AccessPolicy] = None,
) -> T | F:
    """Return ``content`` when access is granted, otherwise ``fallback`` (default: nothing)."""
    return content if evaluate(principal, requirement, policy).granted else fallback


def has_role(principal: Optional[Principal], role: str | Iterable[str]) -> bool:
    """Exact role match against one role or any of several."""
    if principal is None:
        return False
    if isinstance(role, str):
        return principal.role == role
    return principal.role in set(role)


def _trace(principal: Optional[Principal], requirement: AccessRequirement, decision: Decision) -> None:
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(
        json.dumps(
            {
                "event": "access_decision",
                "sub": principal.sub if principal else None,
                "role": principal.role if principal else None,
                "feature": requirement.feature,
                "minimum_role": requirement.minimum_role,
                "allowed_roles": sorted(requirement.allowed_roles or ()),
                "granted": decision.granted,
                "reason": decision.reason.value,
            }
        )
    )
