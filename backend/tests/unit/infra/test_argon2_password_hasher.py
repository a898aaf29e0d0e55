"""Unit tests for the Argon2id password hasher adapter."""

from __future__ import annotations

import pytest

from pos_backoffice.core.config import TestingConfig
from pos_backoffice.infra.security.argon2_password_hasher import Argon2PasswordHasher
from pos_backoffice.services._shared.errors import InternalError


@pytest.fixture()
def hasher() -> Argon2PasswordHasher:
    # Cheap parameters: the algorithm is what is under test, not the cost
    return Argon2PasswordHasher(memory_cost=1024, time_cost=1, parallelism=1)


def test_hash_produces_self_describing_argon2id_string(hasher):
    hashed = hasher.hash("correct horse")

    assert hashed.startswith("$argon2id$v=19$m=1024,t=1,p=1$")
    assert "correct horse" not in hashed


def test_hash_is_salted(hasher):
    assert hasher.hash("same password") != hasher.hash("same password")


def test_verify_accepts_match_and_rejects_mismatch(hasher):
    hashed = hasher.hash("correct horse")

    assert hasher.verify("correct horse", hashed) is True
    assert hasher.verify("wrong horse", hashed) is False


def test_verify_keeps_working_after_a_cost_change(hasher):
    hashed = hasher.hash("correct horse")
    stronger = Argon2PasswordHasher(memory_cost=2048, time_cost=2, parallelism=1)

    # Parameters are read from the stored hash, not from the hasher instance
    assert stronger.verify("correct horse", hashed) is True


def test_verify_raises_internal_error_on_malformed_hash(hasher):
    with pytest.raises(InternalError):
        hasher.verify("whatever", "not-a-phc-string")


def test_from_config_reads_argon2_keys():
    config = {
        "ARGON2_MEMORY": TestingConfig.ARGON2_MEMORY,
        "ARGON2_ITERATIONS": TestingConfig.ARGON2_ITERATIONS,
        "ARGON2_PARALLELISM": TestingConfig.ARGON2_PARALLELISM,
        "ARGON2_SALT_LENGTH": 16,
        "ARGON2_KEY_LENGTH": 32,
    }
    hasher = Argon2PasswordHasher.from_config(config)

    assert hasher.memory_cost == 1024
    assert hasher.time_cost == 1
    assert hasher.parallelism == 1
    assert hasher.hash("pw").startswith("$argon2id$")


def test_dummy_hash_is_cached_and_never_matches(hasher):
    dummy = hasher.dummy_hash()

    assert dummy is hasher.dummy_hash()
    assert dummy.startswith("$argon2id$v=19$m=1024,t=1,p=1$")
    assert hasher.verify("", dummy) is False
