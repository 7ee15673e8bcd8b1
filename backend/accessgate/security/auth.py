"""Bearer-token principals and route guards for the decision API.

Design:
- Bearer JWT tokens (HS256) minted by the dashboard's auth server.
- Role is carried as a plain string claim; whether it is known is the
  policy's business, not the token's.
- Token problems on optional endpoints mean "no principal", never an error.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import os
import time
from typing import Any, Callable, Optional

from fastapi import Depends, HTTPException, Request, status

from accessgate.core.settings import JWT_SECRET_ENV
from accessgate.security.gate import AccessRequirement, DecisionReason, Principal, evaluate


class AuthError(HTTPException):
    pass


class TokenError(ValueError):
    """Token could not be verified; carries a short client-safe reason."""


def _b64url_decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def sign_hs256(signing_input: bytes, secret: str) -> str:
    return _b64url_encode(hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest())


def decode_and_verify_jwt(token: str, secret: Optional[str]) -> dict[str, Any]:
    """Verify an HS256 JWT and its minimal claims (``sub``, ``role``, optional ``exp``)."""
    if not secret:
        raise TokenError("Token verification is not configured.")
    try:
        header_b64, payload_b64, sig_b64 = token.split(".")
        signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    except ValueError as e:
        raise TokenError("Invalid token format.") from e

    expected_sig = sign_hs256(signing_input, secret)
    if not hmac.compare_digest(expected_sig.encode("ascii"), sig_b64.encode("utf-8")):
        raise TokenError("Invalid token signature.")

    try:
        header = json.loads(_b64url_decode(header_b64))
        payload = json.loads(_b64url_decode(payload_b64))
    except (ValueError, UnicodeDecodeError) as e:
        raise TokenError("Invalid token encoding.") from e
    if not isinstance(header, dict) or not isinstance(payload, dict):
        raise TokenError("Invalid token encoding.")

    if header.get("alg") != "HS256" or header.get("typ") != "JWT":
        raise TokenError("Unsupported token header.")

    exp = payload.get("exp")
    if exp is not None:
        try:
            exp_i = int(exp)
        except (TypeError, ValueError, OverflowError) as e:
            raise TokenError("Invalid exp claim.") from e
        if int(time.time()) >= exp_i:
            raise TokenError("Token expired.")

    if not payload.get("sub") or not payload.get("role"):
        raise TokenError("Missing required claims.")
    return payload


def _get_jwt_secret() -> Optional[str]:
    return os.environ.get(JWT_SECRET_ENV) or None


def _bearer_token(request: Request) -> Optional[str]:
    auth = request.headers.get("authorization")
    if not auth or not auth.lower().startswith("bearer "):
        return None
    return auth.split(" ", 1)[1].strip() or None


def maybe_get_principal(request: Request) -> Optional[Principal]:
    """Principal from the bearer token, or ``None`` for any missing/invalid token."""
    token = _bearer_token(request)
    if token is None:
        return None
    try:
        claims = decode_and_verify_jwt(token, _get_jwt_secret())
    except TokenError:
        return None
    return Principal(role=str(claims["role"]), sub=str(claims["sub"]))


def require_access(requirement: AccessRequirement) -> Callable[[Optional[Principal]], Principal]:
    """FastAPI dependency factory: 401 without a principal, 403 when the gate denies."""

    def _dep(principal: Optional[Principal] = Depends(maybe_get_principal)) -> Principal:
        decision = evaluate(principal, requirement)
        if decision.reason is DecisionReason.UNAUTHENTICATED:
            raise AuthError(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated.")
        if not decision.granted:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied.")
        return principal  # type: ignore[return-value]

    return _dep
