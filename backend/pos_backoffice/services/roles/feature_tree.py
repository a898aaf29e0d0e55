"""Assemble the flat feature table into a parent/child tree."""

from __future__ import annotations

import uuid
from collections.abc import Iterable

from pos_backoffice.models import Feature
from pos_backoffice.services.roles.dto import FeatureNodeOut


def build_feature_tree(features: Iterable[Feature]) -> list[FeatureNodeOut]:
    """
    Build the feature tree from rows in display order.

    Nodes are first indexed by id, child ids are collected per parent, and
    only then is the nested structure materialized, so every parent ends up
    with all of its children whatever the row order. A row whose parent is
    missing is promoted to a root.

    :param features: Rows, typically sorted by ``sort_order``.
    :returns: Root nodes with nested children, order preserved.
    :rtype: list[FeatureNodeOut]
    """
    rows = list(features)
    arena: dict[uuid.UUID, Feature] = {f.id: f for f in rows}
    children: dict[uuid.UUID, list[uuid.UUID]] = {}
    roots: list[uuid.UUID] = []

    for row in rows:
        if row.parent_id is not None and row.parent_id in arena:
            children.setdefault(row.parent_id, []).append(row.id)
        else:
            roots.append(row.id)

    def materialize(feature_id: uuid.UUID) -> FeatureNodeOut:
        row = arena[feature_id]
        return FeatureNodeOut(
            id=row.id,
            parent_id=row.parent_id,
            name=row.name,
            slug=row.slug,
            module=row.module,
            actions=list(row.actions or []),
            sort_order=row.sort_order,
            children=[materialize(child) for child in children.get(feature_id, [])],
        )

    return [materialize(root) for root in roots]
