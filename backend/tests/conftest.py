from __future__ import annotations

import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[2]

# Ensure `backend/accessgate` is importable without installation.
BACKEND_DIR = ROOT / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from accessgate.security import policy as policy_mod  # noqa: E402
from accessgate.security.policy import AccessPolicy  # noqa: E402


EXAMPLE_RANKS = {"guest": 0, "staff": 1, "manager": 2, "admin": 3}
EXAMPLE_GRANTS = {
    "staff": ["inventory"],
    "manager": ["inventory", "dashboard"],
    "admin": ["inventory", "dashboard", "settings"],
}


@pytest.fixture()
def example_policy() -> AccessPolicy:
    """guest=0, staff=1, manager=2, admin=3 with a small inventory/dashboard/settings matrix."""
    return AccessPolicy.from_tables(EXAMPLE_RANKS, EXAMPLE_GRANTS, source="example")


@pytest.fixture()
def active_example_policy(monkeypatch: pytest.MonkeyPatch, example_policy: AccessPolicy) -> AccessPolicy:
    """Install the example policy process-wide for one test, restoring the previous state after."""
    monkeypatch.setattr(policy_mod, "_active", example_policy)
    return example_policy


def make_jwt(sub: str, role: str, secret: str, *, exp: float | None = None) -> str:
    """HS256 JWT generator for API tests (no external dependency)."""
    import base64, hashlib, hmac, json  # noqa: E401

    def b64url(raw: bytes) -> str:
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    header = {"alg": "HS256", "typ": "JWT"}
    payload: dict[str, object] = {"sub": sub, "role": role}
    if exp is not None:
        payload["exp"] = exp

    header_b64 = b64url(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = b64url(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    sig = hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()
    return f"{header_b64}.{payload_b64}.{b64url(sig)}"
