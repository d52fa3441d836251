# config/validation.py

"""
Environment variable validation for the review console.
Validates required environment variables at startup.
"""

import os
import sys
from typing import List, Tuple

from .base import is_valid_backend_url


def validate_environment(flask_env: str = None) -> Tuple[bool, List[str]]:
    """
    Validate required environment variables.

    Args:
        flask_env: Flask environment (development, production, testing)
                  If None, reads from FLASK_ENV environment variable

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    if flask_env is None:
        flask_env = os.environ.get("FLASK_ENV", "development")

    errors = []

    # Only validate in production
    if flask_env != "production":
        return True, []

    secret_key = os.environ.get("SECRET_KEY", "")
    if not secret_key or secret_key == "your-secret-key" or secret_key == "your_secret_key":
        errors.append(
            "SECRET_KEY is required in production and must not be the default value. "
            'Generate a secure key: python -c "import secrets; print(secrets.token_hex(32))"'
        )

    backend_url = os.environ.get("MIGRATION_BACKEND_URL")
    if not backend_url:
        errors.append(
            "MIGRATION_BACKEND_URL is required in production. "
            "Set it to the base URL of the migration backend service."
        )
    elif not is_valid_backend_url(backend_url):
        errors.append(f"MIGRATION_BACKEND_URL must be an absolute http(s) URL, got {backend_url!r}.")

    timeout = os.environ.get("MIGRATION_BACKEND_TIMEOUT_SECONDS")
    if timeout is not None:
        try:
            if int(timeout) <= 0:
                raise ValueError
        except ValueError:
            errors.append("MIGRATION_BACKEND_TIMEOUT_SECONDS must be a positive integer.")

    if os.environ.get("LOG_FORMAT", "json").lower() not in ("json", "text"):
        errors.append("LOG_FORMAT must be either 'json' or 'text'.")

    is_valid = len(errors) == 0
    return is_valid, errors


def validate_and_exit(flask_env: str = None) -> None:
    """
    Validate environment variables and exit with error if validation fails.
    Intended to be called at application startup.

    Args:
        flask_env: Flask environment (development, production, testing)
    """
    is_valid, errors = validate_environment(flask_env)

    if not is_valid:
        print("=" * 80, file=sys.stderr)
        print("ENVIRONMENT VALIDATION FAILED", file=sys.stderr)
        print("=" * 80, file=sys.stderr)
        print("\nThe following environment variables are missing or invalid:\n", file=sys.stderr)

        for i, error in enumerate(errors, 1):
            print(f"{i}. {error}", file=sys.stderr)

        print("\n" + "=" * 80, file=sys.stderr)
        print("Please check your .env file or environment variables.", file=sys.stderr)
        print("See .env.example for required configuration.", file=sys.stderr)
        print("=" * 80, file=sys.stderr)

        sys.exit(1)
