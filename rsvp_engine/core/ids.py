"""Identifier generation for events, invites and responses.

Identifiers combine the nanosecond clock with 16 bytes from the ``secrets``
CSPRNG. Both parts only use URL-safe characters, so an identifier can be
placed in a path segment without escaping.
"""

import secrets
import time

ID_PREFIXES = {
    "event": "evt",
    "invite": "inv",
    "response": "rsp",
}

RANDOM_BYTES = 16


def new_id(kind: str) -> str:
    """Return a new identifier for the given kind of record."""
    try:
        prefix = ID_PREFIXES[kind]
    except KeyError:
        raise ValueError(f"Unknown identifier kind: {kind}") from None
    return f"{prefix}_{time.time_ns():x}{secrets.token_urlsafe(RANDOM_BYTES)}"


def ensure_entropy() -> None:
    """Fail fast when the operating system cannot supply random bytes.

    Called once at startup; ``new_id`` itself never fails.
    """
    try:
        sample = secrets.token_bytes(RANDOM_BYTES)
    except NotImplementedError as e:
        raise RuntimeError("No cryptographic entropy source is available") from e
    if len(sample) != RANDOM_BYTES:
        raise RuntimeError("Entropy source returned a short read")
