from accessgate.session.provider import (
    Authenticated,
    SessionCheck,
    SessionProvider,
    TransportError,
    Unauthenticated,
    principal_of,
)

__all__ = [
    "Authenticated",
    "SessionCheck",
    "SessionProvider",
    "TransportError",
    "Unauthenticated",
    "principal_of",
]
