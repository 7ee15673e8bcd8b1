"""Controlled errors for accessgate.

Access decisions themselves never raise: every deny path is a ``Decision``.
The errors below belong to the edges around the evaluator (policy loading
and the session boundary) and are meant to be caught by their callers.
"""

from __future__ import annotations


class AccessGateError(RuntimeError):
    """Base error for accessgate."""


class PolicyConfigError(AccessGateError):
    """Raised when a role table or permission matrix is invalid at load time."""


class SessionError(AccessGateError):
    """Base error for explicit session operations (login/logout)."""


class LoginFailed(SessionError):
    """Raised when credentials could not be exchanged for a session."""


class LogoutFailed(SessionError):
    """Raised when the server could not end the session.

    Local session state has already been cleared when this is raised.
    """
