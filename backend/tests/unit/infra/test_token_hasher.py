"""Unit tests for opaque token generation and digesting."""

from __future__ import annotations

import hashlib

from pos_backoffice.infra.security.token_hasher import TOKEN_BYTES, generate_token, hash_token


def test_generate_token_returns_hex_plaintext_and_its_digest():
    plain, digest = generate_token()

    assert len(plain) == TOKEN_BYTES * 2
    int(plain, 16)  # hex only
    assert digest == hash_token(plain)
    assert len(digest) == 64


def test_hash_token_is_deterministic_sha256():
    assert hash_token("abc") == hashlib.sha256(b"abc").hexdigest()
    assert hash_token("abc") == hash_token("abc")
    assert hash_token("abc") != hash_token("abd")


def test_generated_tokens_are_unique():
    seen = {generate_token()[0] for _ in range(50)}
    assert len(seen) == 50
