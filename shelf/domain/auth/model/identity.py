"""Identity hierarchy - who is making the request."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """Base for all request identities."""

    pass


@dataclass(frozen=True)
class Anonymous(Identity):
    """Request without an identity header."""

    pass


@dataclass(frozen=True)
class Caller(Identity):
    """Request carrying an opaque, unverified identity string (usually an email)."""

    value: str


def identity_value(identity: Identity) -> str | None:
    """Return the raw identity string, or None for anonymous requests."""
    if isinstance(identity, Caller):
        return identity.value
    return None
