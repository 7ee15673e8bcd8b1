"""Access decision endpoints.

The dashboard shell asks these endpoints which regions and menu entries to
show. Answers are the same client-local decisions the gate makes in-process;
they do not replace enforcement on the data endpoints themselves.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from accessgate.schemas.access import (
    AccessRequirementIn,
    DecisionResponse,
    NavItemResponse,
    PolicyResponse,
    SessionResponse,
)
from accessgate.security.auth import maybe_get_principal, require_access
from accessgate.security.gate import AccessRequirement, Principal, evaluate
from accessgate.security.navigation import visible_nav_items
from accessgate.security.permissions import Feature
from accessgate.security.policy import get_policy


router = APIRouter()

VIEW_POLICY = AccessRequirement(feature=Feature.SETTINGS.value)


@router.get("/session", response_model=SessionResponse)
async def get_session(principal: Optional[Principal] = Depends(maybe_get_principal)) -> SessionResponse:
    if principal is None:
        return SessionResponse(authenticated=False)
    features = get_policy().permissions.accessible_features(principal.role)
    return SessionResponse(authenticated=True, role=principal.role, features=sorted(features))


@router.get("/navigation", response_model=list[NavItemResponse])
async def get_navigation(principal: Optional[Principal] = Depends(maybe_get_principal)) -> list[NavItemResponse]:
    return [
        NavItemResponse(name=item.name, href=item.href, feature=item.feature)
        for item in visible_nav_items(principal)
    ]


@router.post("/evaluate", response_model=DecisionResponse)
async def post_evaluate(
    body: AccessRequirementIn,
    principal: Optional[Principal] = Depends(maybe_get_principal),
) -> DecisionResponse:
    requirement = AccessRequirement(
        feature=body.feature,
        minimum_role=body.minimum_role,
        allowed_roles=body.allowed_roles,  # type: ignore[arg-type]
    )
    decision = evaluate(principal, requirement)
    return DecisionResponse(granted=decision.granted, reason=decision.reason.value)


@router.get("/policy", response_model=PolicyResponse)
async def get_policy_tables(_: Principal = Depends(require_access(VIEW_POLICY))) -> PolicyResponse:
    policy = get_policy()
    hierarchy = policy.hierarchy
    return PolicyResponse(
        source=policy.source,
        roles={role: hierarchy.rank(role) for role in hierarchy.roles()},
        permissions=policy.permissions.as_dict(),
    )
