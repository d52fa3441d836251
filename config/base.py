# config/base.py
import os
from datetime import timedelta
from urllib.parse import urlparse

DEFAULT_BACKEND_URL = "http://localhost:5050"


def _coerce_bool(value, default=False):
    """Convert environment-style truthy/falsey values to bool."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    value_str = str(value).strip().lower()
    if value_str in {"1", "true", "yes", "on"}:
        return True
    if value_str in {"0", "false", "no", "off"}:
        return False
    return default


def _coerce_int(value, default, *, minimum=None):
    """Parse an integer setting, falling back to ``default`` on bad input."""
    if value is None or str(value).strip() == "":
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        return default
    if minimum is not None and number < minimum:
        return default
    return number


def _normalize_backend_url(value):
    """
    Strip whitespace and trailing slashes from the backend base URL.

    Returns the default URL when the value is empty.
    """
    if not value or not str(value).strip():
        return DEFAULT_BACKEND_URL
    return str(value).strip().rstrip("/")


def is_valid_backend_url(value) -> bool:
    """Return True when ``value`` is an absolute http(s) URL with a host."""
    if not value:
        return False
    parsed = urlparse(str(value))
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class Config:
    # SECRET_KEY must be set via environment variable in production.
    # Generate with: python -c "import secrets; print(secrets.token_hex(32))"
    _flask_env = os.environ.get("FLASK_ENV", "development")
    _is_testing = _flask_env == "testing"
    _is_production = _flask_env == "production"

    SECRET_KEY = os.environ.get("SECRET_KEY")

    if not SECRET_KEY and _is_production:
        raise ValueError(
            "SECRET_KEY environment variable is required in production. "
            'Generate with: python -c "import secrets; print(secrets.token_hex(32))"'
        )

    if not SECRET_KEY and not _is_testing:
        import warnings

        warnings.warn(
            "SECRET_KEY not set. Using default for development only. "
            "Set SECRET_KEY environment variable before deploying.",
            UserWarning,
        )
        SECRET_KEY = "dev-secret-key-change-in-production"

    if not SECRET_KEY:
        SECRET_KEY = "test-secret-key-placeholder"

    # Migration backend (statement conversion, fixes, SQL execution)
    MIGRATION_BACKEND_URL = _normalize_backend_url(os.environ.get("MIGRATION_BACKEND_URL"))
    MIGRATION_BACKEND_TIMEOUT_SECONDS = _coerce_int(
        os.environ.get("MIGRATION_BACKEND_TIMEOUT_SECONDS"), 30, minimum=1
    )

    # Uploads are streamed straight through to the backend
    MAX_UPLOAD_MB = _coerce_int(os.environ.get("MAX_UPLOAD_MB"), 100, minimum=1)
    MAX_CONTENT_LENGTH = MAX_UPLOAD_MB * 1024 * 1024

    # Server-side editing drafts
    DRAFT_TTL_SECONDS = _coerce_int(os.environ.get("DRAFT_TTL_SECONDS"), 3600, minimum=60)
    DRAFT_MAX_ENTRIES = _coerce_int(os.environ.get("DRAFT_MAX_ENTRIES"), 256, minimum=1)

    APP_FOOTER_QUOTE = os.environ.get(
        "APP_FOOTER_QUOTE",
        '"The early 2010s called, they want their Twitter Bootstrap theme back!" - Vanessa Ung',
    )

    # Session configuration
    PERMANENT_SESSION_LIFETIME = timedelta(days=1)
    SESSION_COOKIE_SECURE = False  # Set to True in production with HTTPS
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    # CSRF protection
    WTF_CSRF_ENABLED = _coerce_bool(os.environ.get("WTF_CSRF_ENABLED"), default=True)


class DevelopmentConfig(Config):
    DEBUG = True
    TEMPLATES_AUTO_RELOAD = True


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = os.environ.get("SECRET_KEY", "test-secret-key-for-testing-only")
    MIGRATION_BACKEND_URL = "http://backend.test:5050"
    MIGRATION_BACKEND_TIMEOUT_SECONDS = 5
    WTF_CSRF_ENABLED = False


class ProductionConfig(Config):
    DEBUG = False
    SESSION_COOKIE_SECURE = _coerce_bool(os.environ.get("SESSION_COOKIE_SECURE"), default=True)
