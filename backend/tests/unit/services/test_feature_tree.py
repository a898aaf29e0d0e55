"""Unit tests for assembling the feature tree."""

from __future__ import annotations

import uuid

from pos_backoffice.models import Feature
from pos_backoffice.services.roles.feature_tree import build_feature_tree


def feature(slug: str, *, parent: Feature | None = None, actions=None, order: int = 0) -> Feature:
    return Feature(
        id=uuid.uuid4(),
        parent_id=parent.id if parent is not None else None,
        name=slug.title(),
        slug=slug,
        module=slug.split(".")[0],
        actions=list(actions or []),
        sort_order=order,
    )


def test_children_are_nested_under_their_parent_in_order():
    root = feature("master-data", order=1)
    product = feature("master-data.product", parent=root, actions=["read"], order=2)
    unit = feature("master-data.unit", parent=root, actions=["read"], order=3)

    tree = build_feature_tree([root, product, unit])

    assert [n.slug for n in tree] == ["master-data"]
    assert [c.slug for c in tree[0].children] == ["master-data.product", "master-data.unit"]
    assert tree[0].children[0].actions == ["read"]
    assert tree[0].children[0].children == []


def test_child_listed_before_parent_is_still_attached():
    root = feature("purchase", order=5)
    order = feature("purchase.order", parent=root, actions=["read"], order=6)

    tree = build_feature_tree([order, root])

    assert [n.slug for n in tree] == ["purchase"]
    assert [c.slug for c in tree[0].children] == ["purchase.order"]


def test_deeper_levels_are_materialized():
    root = feature("reporting")
    mid = feature("reporting.sales", parent=root)
    leaf = feature("reporting.sales.daily", parent=mid, actions=["read"])

    tree = build_feature_tree([root, mid, leaf])

    assert tree[0].children[0].children[0].slug == "reporting.sales.daily"


def test_orphan_is_promoted_to_root():
    missing_parent = feature("ghost")
    orphan = feature("ghost.child", parent=missing_parent, actions=["read"])

    tree = build_feature_tree([orphan])

    assert [n.slug for n in tree] == ["ghost.child"]


def test_empty_catalog():
    assert build_feature_tree([]) == []
