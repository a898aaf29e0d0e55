"""Reverse-proxy awareness for the WSGI pipeline."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """
    Trust ``X-Forwarded-*`` headers from ``PROXYFIX_HOPS`` proxies.

    The auth rate limiter keys on ``request.remote_addr``; with too many
    trusted hops a client could pick its own bucket by forging
    ``X-Forwarded-For``. Disable with ``USE_PROXYFIX=False`` when the app is
    exposed directly.
    """
    if not app.config.get("USE_PROXYFIX", True):
        return
    hops = int(app.config.get("PROXYFIX_HOPS", 1))
    app.wsgi_app = ProxyFix(  # type: ignore[method-assign]
        app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops, x_prefix=hops
    )
