"""
Migration backend client package.

``get_backend_client`` caches one client per Flask app so the underlying
``requests.Session`` connection pool is reused across requests.
"""

from __future__ import annotations

from flask import Flask, current_app

from .backend import (
    BackendError,
    BackendPayloadError,
    BackendResponseError,
    BackendUnavailableError,
    MigrationBackendClient,
)

BACKEND_EXTENSION_KEY = "migration_backend"

__all__ = [
    "BACKEND_EXTENSION_KEY",
    "BackendError",
    "BackendPayloadError",
    "BackendResponseError",
    "BackendUnavailableError",
    "MigrationBackendClient",
    "get_backend_client",
    "init_backend_client",
]


def init_backend_client(app: Flask) -> MigrationBackendClient:
    """Create the backend client from app config and register it as an extension."""
    client = MigrationBackendClient(
        app.config["MIGRATION_BACKEND_URL"],
        timeout=app.config.get("MIGRATION_BACKEND_TIMEOUT_SECONDS", 30),
        logger=app.logger,
    )
    app.extensions[BACKEND_EXTENSION_KEY] = client
    return client


def get_backend_client(app: Flask | None = None) -> MigrationBackendClient:
    """Return the registered client, creating it lazily if configuration changed."""
    app = app or current_app._get_current_object()
    client = app.extensions.get(BACKEND_EXTENSION_KEY)
    if client is None or client.base_url != app.config["MIGRATION_BACKEND_URL"].rstrip("/"):
        client = init_backend_client(app)
    return client
