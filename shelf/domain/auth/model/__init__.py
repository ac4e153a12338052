"""Auth domain models."""

from .identity import Anonymous, Caller, Identity, identity_value

__all__ = [
    "Anonymous",
    "Caller",
    "Identity",
    "identity_value",
]
