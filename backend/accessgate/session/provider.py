"""Session provider: the boundary between the dashboard auth server and the gate.

The gate only ever sees ``current_principal()``: a snapshot that is either a
``Principal`` or ``None``. Login and logout report failures explicitly to
their callers. Refresh never raises; any transport or validation problem
collapses to "no principal" and is logged so operators can still tell a
network outage from a signed-out user.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

import httpx

from accessgate.core.errors import LoginFailed, LogoutFailed
from accessgate.core.settings import Settings, get_settings
from accessgate.security.gate import Principal


logger = logging.getLogger("accessgate.session")

LOGIN_PATH = "/api/auth/login"
LOGOUT_PATH = "/api/auth/logout"
SESSION_PATH = "/api/auth/session"


@dataclass(frozen=True, slots=True)
class Authenticated:
    principal: Principal


@dataclass(frozen=True, slots=True)
class Unauthenticated:
    pass


@dataclass(frozen=True, slots=True)
class TransportError:
    detail: str


SessionCheck = Union[Authenticated, Unauthenticated, TransportError]


def principal_of(check: SessionCheck) -> Optional[Principal]:
    """Collapse a session check to what the gate consumes."""
    if isinstance(check, Authenticated):
        return check.principal
    return None


def _principal_from_payload(payload: Any) -> Optional[Principal]:
    """Extract ``{"user": {"role": ..., "username": ...}}``; ``None`` when malformed."""
    if not isinstance(payload, dict):
        return None
    user = payload.get("user")
    if not isinstance(user, dict):
        return None
    role = user.get("role")
    if not isinstance(role, str) or not role:
        return None
    sub = user.get("username", user.get("id"))
    return Principal(role=role, sub=str(sub) if sub is not None else None)


class SessionProvider:
    """Holds the current session snapshot for one dashboard client."""

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        settings = settings or get_settings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=settings.session_base_url,
            timeout=settings.session_timeout_seconds,
        )
        self._principal: Optional[Principal] = None
        # Session-derived data (e.g. per-user dashboard queries). Dropped with the session.
        self.cache: dict[str, Any] = {}
        # Bumped whenever the session changes hands; stale refreshes are discarded.
        self._generation = 0

    def current_principal(self) -> Optional[Principal]:
        return self._principal

    async def login(self, username: str, password: str) -> Principal:
        try:
            response = await self._client.post(LOGIN_PATH, json={"username": username, "password": password})
        except httpx.HTTPError as e:
            raise LoginFailed(f"Login failed: {e}") from e
        if response.status_code >= 400:
            raise LoginFailed(f"Login failed: HTTP {response.status_code}")
        principal = _principal_from_payload(self._json(response))
        if principal is None:
            raise LoginFailed("Login failed: malformed session payload")
        self._generation += 1
        self._set_principal(principal)
        self._log("login", principal=principal)
        return principal

    async def logout(self) -> None:
        previous = self._principal
        self._clear()
        try:
            response = await self._client.post(LOGOUT_PATH, json={})
        except httpx.HTTPError as e:
            raise LogoutFailed(f"Logout failed: {e}") from e
        if response.status_code >= 400:
            raise LogoutFailed(f"Logout failed: HTTP {response.status_code}")
        self._log("logout", principal=previous)

    async def refresh(self) -> SessionCheck:
        """Re-validate the session. Never raises for transport/validation failures.

        A check that completes after a login or logout reports its result but
        leaves the newer session state untouched.
        """
        generation = self._generation
        check = await self._check()
        if generation != self._generation:
            return check
        principal = principal_of(check)
        if principal is None:
            self._clear()
        else:
            self._set_principal(principal)
        if isinstance(check, TransportError):
            logger.warning(json.dumps({"event": "session_check_failed", "detail": check.detail}))
        return check

    async def _check(self) -> SessionCheck:
        try:
            response = await self._client.get(SESSION_PATH)
        except httpx.HTTPError as e:
            return TransportError(detail=f"{type(e).__name__}: {e}")
        if response.status_code in (401, 403):
            return Unauthenticated()
        if response.status_code >= 400:
            return TransportError(detail=f"HTTP {response.status_code}")
        payload = self._json(response)
        if payload is None:
            return TransportError(detail="Invalid session payload")
        principal = _principal_from_payload(payload)
        if principal is None:
            return Unauthenticated()
        return Authenticated(principal=principal)

    def _set_principal(self, principal: Principal) -> None:
        if self._principal is not None and self._principal != principal:
            self.cache.clear()
        self._principal = principal

    def _clear(self) -> None:
        self._generation += 1
        self._principal = None
        self.cache.clear()

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _log(event: str, *, principal: Optional[Principal]) -> None:
        logger.info(
            json.dumps(
                {
                    "event": event,
                    "sub": principal.sub if principal else None,
                    "role": principal.role if principal else None,
                }
            )
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "SessionProvider":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
