"""Schemas for access decision endpoints."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


ReasonCode = Literal["UNAUTHENTICATED", "FEATURE_DENIED", "ROLE_TOO_LOW", "ROLE_NOT_ALLOWED", "GRANTED"]


class AccessRequirementIn(BaseModel):
    """Requirement posted by a protected region."""

    model_config = ConfigDict(extra="forbid")

    feature: Optional[str] = None
    minimum_role: Optional[str] = None
    allowed_roles: Optional[list[str]] = None


class DecisionResponse(BaseModel):
    granted: bool
    reason: ReasonCode


class SessionResponse(BaseModel):
    authenticated: bool
    role: Optional[str] = None
    features: list[str] = Field(default_factory=list)


class NavItemResponse(BaseModel):
    name: str
    href: str
    feature: str


class PolicyResponse(BaseModel):
    """Role ranks (most privileged first) and the role -> features matrix."""

    source: str
    roles: dict[str, int]
    permissions: dict[str, list[str]]
