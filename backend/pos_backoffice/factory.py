"""Flask application factory for the POS back-office API."""

from __future__ import annotations

from flask import Flask

from pos_backoffice import cli
from pos_backoffice.api import init_app as init_api
from pos_backoffice.core import cors, errors, extensions, proxy, security
from pos_backoffice.core.config import BaseConfig, get_config
from pos_backoffice.core.logger import configure_logging, init_app as init_logging

# Registration order matters: ProxyFix wraps the WSGI app before anything reads
# the client address, and error handlers come after the blueprints.
INITIALIZERS = (
    proxy.init_app,
    extensions.init_app,
    init_logging,
    cors.init_app,
    security.init_app,
    init_api,
    errors.init_app,
    cli.init_app,
)


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """
    Build the application.

    :param config: Settings object or import path; ``APP_ENV`` decides when omitted.
    :param instance_config_filename: Optional overrides read from ``instance/``.
    """
    app = Flask(__name__, instance_relative_config=instance_relative_config)
    app.config.from_object(config if config is not None else get_config())
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))
    for initializer in INITIALIZERS:
        initializer(app)
    return app
