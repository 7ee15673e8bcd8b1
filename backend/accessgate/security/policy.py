"""Process-wide access policy (role hierarchy + permission matrix).

The active policy is one immutable object. It is installed once at startup
via ``init_policy`` and can only be replaced as a whole; readers grab the
current reference and never see a half-applied edit.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError

from accessgate.core.errors import PolicyConfigError
from accessgate.core.settings import Settings, get_settings
from accessgate.security.permissions import DEFAULT_GRANTS, PermissionMatrix
from accessgate.security.roles import DEFAULT_ROLE_RANKS, RoleHierarchy


logger = logging.getLogger("accessgate.policy")


class PolicyDocument(BaseModel):
    """On-disk policy format."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    roles: dict[str, StrictInt] = Field(min_length=1)
    permissions: dict[str, list[str]] = Field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class AccessPolicy:
    hierarchy: RoleHierarchy
    permissions: PermissionMatrix
    source: str = "inline"

    @classmethod
    def from_tables(
        cls,
        ranks: Mapping[str, int],
        grants: Mapping[str, list[str] | tuple[str, ...]],
        *,
        source: str = "inline",
    ) -> "AccessPolicy":
        hierarchy = RoleHierarchy(ranks)
        return cls(hierarchy=hierarchy, permissions=PermissionMatrix(grants, hierarchy), source=source)

    @classmethod
    def from_document(cls, doc: PolicyDocument, *, source: str = "document") -> "AccessPolicy":
        return cls.from_tables(doc.roles, doc.permissions, source=source)

    def to_document(self) -> PolicyDocument:
        return PolicyDocument(roles=self.hierarchy.as_dict(), permissions=self.permissions.as_dict())


def default_policy() -> AccessPolicy:
    return AccessPolicy.from_tables(DEFAULT_ROLE_RANKS, DEFAULT_GRANTS, source="builtin")


def load_policy_file(path: Path) -> AccessPolicy:
    """Parse and validate a JSON policy file."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise PolicyConfigError(f"Cannot read policy file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise PolicyConfigError(f"Policy file {path} is not valid JSON: {e}") from e
    try:
        doc = PolicyDocument.model_validate(raw)
    except ValidationError as e:
        raise PolicyConfigError(f"Policy file {path} is invalid: {e}") from e
    return AccessPolicy.from_document(doc, source=str(path))


_lock = threading.Lock()
_active: Optional[AccessPolicy] = None


def install_policy(policy: AccessPolicy) -> Optional[AccessPolicy]:
    """Atomically replace the active policy and return the one it replaced."""
    global _active
    with _lock:
        previous = _active
        _active = policy
    logger.info(
        json.dumps(
            {
                "event": "policy_installed",
                "source": policy.source,
                "roles": len(policy.hierarchy),
                "features": len(policy.permissions.features()),
            }
        )
    )
    return previous


def init_policy(settings: Optional[Settings] = None) -> AccessPolicy:
    """Explicit startup step: load the configured policy and install it."""
    settings = settings or get_settings()
    if settings.policy_path is not None:
        policy = load_policy_file(settings.policy_path)
    else:
        policy = default_policy()
    install_policy(policy)
    return policy


def get_policy() -> AccessPolicy:
    """Current policy snapshot; installs the built-in default on first use."""
    policy = _active
    if policy is not None:
        return policy
    with _lock:
        if _active is None:
            _install_default_locked()
        return _active  # type: ignore[return-value]


def _install_default_locked() -> None:
    global _active
    _active = default_policy()
    logger.info(json.dumps({"event": "policy_installed", "source": "builtin", "lazy": True}))
