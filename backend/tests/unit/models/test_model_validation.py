"""Attribute-level normalization on the ORM models."""

from __future__ import annotations

import uuid

import pytest

from pos_backoffice.models import Feature, Invitation, Store, User
from pos_backoffice.models.user import normalize_email


def test_normalize_email():
    assert normalize_email("  Ana@Example.COM ") == "ana@example.com"


def test_user_email_is_normalized_on_assignment():
    user = User(email=" Ana@Example.COM ")

    assert user.email == "ana@example.com"


@pytest.mark.parametrize("value", ["", "no-at-sign", "ana@localhost"])
def test_user_rejects_malformed_email(value):
    with pytest.raises(ValueError):
        User(email=value)


def test_store_name_is_trimmed_and_required():
    assert Store(name="  Harbour  ").name == "Harbour"
    with pytest.raises(ValueError, match="Store name is required"):
        Store(name="   ")


def test_user_full_name():
    assert User(first_name="Ana", last_name="Lopez").full_name == "Ana Lopez"
    assert User(first_name="Ana", last_name="").full_name == "Ana"


def test_feature_leaf_means_it_declares_actions():
    assert Feature(slug="reporting", actions=[]).is_leaf is False
    assert Feature(slug="reporting.sales", actions=["read"]).is_leaf is True


def test_invitation_store_uuids():
    ids = [uuid.uuid4(), uuid.uuid4()]

    assert Invitation(store_ids=[str(i) for i in ids]).store_uuids == ids
    assert Invitation(store_ids=None).store_uuids == []
