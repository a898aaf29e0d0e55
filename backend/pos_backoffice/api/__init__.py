"""HTTP surface of the back office.

Each API version exposes a ``REGISTRY`` of ``(blueprint, relative_prefix)``
pairs; they are mounted under ``API_BASE_PREFIX/<version>``.
"""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def url_prefix(*segments: str) -> str:
    """Join path segments into ``/a/b/c``, ignoring empty ones."""
    parts = [s.strip("/") for s in segments if s and s.strip("/")]
    return "/" + "/".join(parts)


def mount_version(
    app: Flask, base: str, version: str, registry: Iterable[tuple[Blueprint, str]]
) -> None:
    for blueprint, relative in registry:
        app.register_blueprint(blueprint, url_prefix=url_prefix(base, version, relative))


def init_app(app: Flask) -> None:
    """Mount every API version (currently only ``v1``)."""
    from pos_backoffice.api.v1 import API_VERSION, REGISTRY

    mount_version(app, app.config.get("API_BASE_PREFIX", "/api"), API_VERSION, REGISTRY)


__all__ = ["init_app", "mount_version", "url_prefix"]
