"""Settings classes for each deployment environment, read from the process env.

Durations use the compact ``15m`` / ``168h`` notation; malformed values fall
back to the documented default instead of failing at import time.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

ENV_VAR: Final[str] = "APP_ENV"

_DURATION_RE: Final = re.compile(r"(\d+)\s*(ms|s|m|h|d)")
_DURATION_UNITS: Final[Mapping[str, str]] = {
    "ms": "milliseconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}

# Local .env, if any
load_dotenv()

_TRUTHY: Final = frozenset({"1", "true", "yes", "y", "on"})


def env_bool(name: str, default: bool = False) -> bool:
    """Read a flag; ``1/true/yes/y/on`` (any case) mean ``True``."""
    raw = os.getenv(name)
    return default if raw is None else raw.strip().lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return int(val.strip())
    except ValueError:
        return default


def parse_duration(raw: str) -> timedelta:
    """Parse a compact duration such as ``"15m"``, ``"168h"`` or ``"1h30m"``.

    Parameters
    ----------
    raw: str
        Concatenation of ``<int><unit>`` groups with units ``ms``, ``s``,
        ``m``, ``h`` or ``d``. A bare integer is read as seconds.

    Returns
    -------
    datetime.timedelta
        Parsed duration.

    Raises
    ------
    ValueError
        If the string does not follow the format above.
    """
    text = raw.strip().lower()
    if text.isdigit():
        return timedelta(seconds=int(text))
    matches = list(_DURATION_RE.finditer(text))
    if not matches or "".join(m.group(0) for m in matches) != text.replace(" ", ""):
        raise ValueError(f"Invalid duration: {raw!r}")
    total = timedelta()
    for m in matches:
        total += timedelta(**{_DURATION_UNITS[m.group(2)]: int(m.group(1))})
    return total


def env_duration(name: str, default: str) -> timedelta:
    """Read a duration environment variable (see :func:`parse_duration`)."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return parse_duration(default)
    try:
        return parse_duration(val)
    except ValueError:
        return parse_duration(default)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Defaults to a development-safe placeholder and should be
        overridden in production.
    JWT_SECRET_KEY: str
        HMAC key used by ``flask-jwt-extended`` for signing access tokens.
        ``JWT_SECRET`` is accepted as an alias.
    JWT_ALGORITHM / JWT_DECODE_ALGORITHMS:
        Signing algorithm and the pinned list accepted on decode.
    JWT_ACCESS_TOKEN_EXPIRES: timedelta
        Access token lifetime (``JWT_ACCESS_TTL``, default ``15m``).
    JWT_REFRESH_TTL: timedelta
        Opaque refresh token lifetime (default ``168h``).
    ARGON2_*: int
        Argon2id cost parameters (memory in KiB, iterations, parallelism,
        salt and key length in bytes).
    EMAIL_VERIFICATION_TTL / PASSWORD_RESET_TTL / INVITATION_TTL: timedelta
        Lifetimes of the single-use tokens delivered by email.
    APP_URL: str
        Public front-end URL used to build links inside notifications.
    MAIL_FROM: str
        Sender address announced in outgoing notifications.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.
    AUTH_RATE_LIMIT: str
        Flask-Limiter expression applied per client IP to public auth routes.

    """

    APP_ENV = "development"
    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY") or os.getenv("JWT_SECRET", "CHANGE_ME_JWT")
    JWT_ALGORITHM = "HS256"
    JWT_DECODE_ALGORITHMS = ["HS256"]
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_ACCESS_TOKEN_EXPIRES = env_duration("JWT_ACCESS_TTL", "15m")
    JWT_REFRESH_TTL = env_duration("JWT_REFRESH_TTL", "168h")

    # Password hashing (Argon2id)
    ARGON2_MEMORY = env_int("ARGON2_MEMORY", 65536)
    ARGON2_ITERATIONS = env_int("ARGON2_ITERATIONS", 3)
    ARGON2_PARALLELISM = env_int("ARGON2_PARALLELISM", 2)
    ARGON2_SALT_LENGTH = env_int("ARGON2_SALT_LENGTH", 16)
    ARGON2_KEY_LENGTH = env_int("ARGON2_KEY_LENGTH", 32)

    # Single-use token lifetimes
    EMAIL_VERIFICATION_TTL = env_duration("EMAIL_VERIFICATION_TTL", "24h")
    PASSWORD_RESET_TTL = env_duration("PASSWORD_RESET_TTL", "1h")
    INVITATION_TTL = env_duration("INVITATION_TTL", "168h")

    # Notifications
    APP_URL = os.getenv("APP_URL", "http://localhost:5173")
    MAIL_FROM = os.getenv("SMTP_FROM", "noreply@pos.local")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    # Rate limiting of public auth routes
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_STRATEGY = "moving-window"
    RATELIMIT_HEADERS_ENABLED = True
    AUTH_RATE_LIMIT = os.getenv("AUTH_RATE_LIMIT", "20 per 2 seconds")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Local runs: debug on, SQL echo opt-in."""

    APP_ENV = "development"
    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """
    Test suite settings.

    In-memory SQLite unless ``TEST_DATABASE_URL`` is set, a fixed JWT key,
    cheap Argon2 parameters (same algorithm) and no rate limiting.
    """

    APP_ENV = "testing"
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    PROPAGATE_EXCEPTIONS = True
    JWT_SECRET_KEY = "testing-secret-key-with-enough-entropy"
    ARGON2_MEMORY = 1024
    ARGON2_ITERATIONS = 1
    ARGON2_PARALLELISM = 1
    RATELIMIT_ENABLED = False


class ProductionConfig(BaseConfig):
    """Deployed instances; logging is configured by the WSGI server."""

    APP_ENV = "production"
    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Pick the settings class named by ``APP_ENV`` (development when unset or unknown)."""
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
