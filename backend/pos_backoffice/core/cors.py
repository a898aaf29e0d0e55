"""Cross-origin policy for the back-office front-end."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

# Headers the back-office SPA sends with every call
ALLOWED_HEADERS = ["Authorization", "Content-Type", "X-Request-ID"]
EXPOSED_HEADERS = ["X-Request-ID", "Retry-After", "X-RateLimit-Remaining"]


def parse_origins(raw: str | None) -> list[str]:
    """Split ``CORS_ORIGINS``; an empty list means any origin."""
    origins = [o.strip() for o in (raw or "").split(",") if o.strip()]
    return [] if origins == ["*"] else origins


def init_app(app: Flask) -> None:
    """
    Allow the configured origins on the API routes only.

    Bearer tokens travel in a header, so credentials (cookies) are only
    enabled when an explicit origin list is configured.
    """
    origins = parse_origins(app.config.get("CORS_ORIGINS"))
    api_routes = f"{app.config.get('API_BASE_PREFIX', '/api').rstrip('/')}/*"

    CORS(
        app,
        resources={api_routes: {"origins": origins or "*"}},
        supports_credentials=bool(origins),
        allow_headers=ALLOWED_HEADERS,
        expose_headers=EXPOSED_HEADERS,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
