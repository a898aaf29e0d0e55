"""Expose the application factory at package level.

Provide convenient access to :func:`pos_backoffice.factory.create_app` so
callers (gunicorn, the Flask CLI, tests) can ``from pos_backoffice import
create_app`` without traversing the package structure.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
