"""Role hierarchy, permission matrix and the access gate evaluator."""

from accessgate.security.gate import (
    AccessRequirement,
    Decision,
    DecisionReason,
    Principal,
    evaluate,
    gate,
    has_role,
    is_granted,
)
from accessgate.security.permissions import Feature, PermissionMatrix
from accessgate.security.policy import AccessPolicy, get_policy, init_policy, install_policy
from accessgate.security.roles import DefaultRole, RoleHierarchy, UnknownRoleError

__all__ = [
    "AccessPolicy",
    "AccessRequirement",
    "Decision",
    "DecisionReason",
    "DefaultRole",
    "Feature",
    "PermissionMatrix",
    "Principal",
    "RoleHierarchy",
    "UnknownRoleError",
    "evaluate",
    "gate",
    "get_policy",
    "has_role",
    "init_policy",
    "install_policy",
    "is_granted",
]
