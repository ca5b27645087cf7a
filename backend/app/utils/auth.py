"""Shared-secret comparison."""

import secrets


def tokens_match(provided: str | None, expected: str | None) -> bool:
    """Constant-time comparison. An unset expected value never matches."""
    if not expected or provided is None:
        return False
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))
