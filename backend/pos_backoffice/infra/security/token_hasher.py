"""Opaque token generation and lookup hashing.

Refresh, verification, reset and invitation tokens are 32 random bytes,
hex-encoded (64 characters). Only their SHA-256 hex digest is stored, which
makes the digest a deterministic lookup key; it is not a password hash.
"""

from __future__ import annotations

import hashlib
import secrets

TOKEN_BYTES = 32


def hash_token(plain: str) -> str:
    """Return the SHA-256 hex digest used to look ``plain`` up."""
    return hashlib.sha256(plain.encode("utf-8")).hexdigest()


def generate_token() -> tuple[str, str]:
    """
    Generate a new opaque token.

    :returns: ``(plaintext, digest)``; hand the plaintext out once, store the digest.
    :rtype: tuple[str, str]
    """
    plain = secrets.token_hex(TOKEN_BYTES)
    return plain, hash_token(plain)
