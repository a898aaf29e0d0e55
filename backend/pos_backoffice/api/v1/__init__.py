"""API v1 blueprint package bundling versioned routes."""

from __future__ import annotations

from flask import Blueprint

API_VERSION = "v1"

# Import blueprints *only here* to keep imports localized and avoid cycles.
from .auth import bp as auth_bp  # noqa: E402
from .features import bp as features_bp  # noqa: E402
from .health import bp as health_bp  # noqa: E402
from .invitations import bp as invitations_bp  # noqa: E402
from .me import bp as me_bp  # noqa: E402
from .roles import bp as roles_bp  # noqa: E402
from .stores import bp as stores_bp  # noqa: E402
from .users import bp as users_bp  # noqa: E402

# Each tuple: (blueprint, url_prefix_relative_to_version)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),  # -> /api/v1
    (auth_bp, "/auth"),  # -> /api/v1/auth
    (me_bp, ""),  # -> /api/v1/me
    (features_bp, "/features"),
    (roles_bp, "/roles"),
    (invitations_bp, "/invitations"),
    (stores_bp, "/stores"),
    (users_bp, "/users"),
]
