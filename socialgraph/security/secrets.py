"""Read signing secrets from the environment, refusing sample values."""
from __future__ import annotations

import os
from typing import Final

__all__ = ["MissingSecretError", "require_secret", "is_placeholder"]

_MIN_SECRET_LENGTH: Final[int] = 8

_SAMPLE_SECRETS: Final[frozenset[str]] = frozenset(
    {
        "secret",
        "changeme",
        "change-me",
        "placeholder",
        "jwt-secret",
        "your-secret-key",
    }
)


class MissingSecretError(RuntimeError):
    """A required secret is unset, too short, or still holds a sample value."""


def is_placeholder(value: str | None) -> bool:
    candidate = (value or "").strip()
    return not candidate or candidate.lower() in _SAMPLE_SECRETS


def require_secret(name: str) -> str:
    """Return the stripped value of ``name`` or raise :class:`MissingSecretError`."""

    value = os.getenv(name)
    if is_placeholder(value):
        raise MissingSecretError(f"{name} must be set to a non-sample value")
    secret = value.strip()
    if len(secret) < _MIN_SECRET_LENGTH:
        raise MissingSecretError(f"{name} must be at least {_MIN_SECRET_LENGTH} characters long")
    return secret
