"""
Draft editing services: editor operations, presentation helpers and the draft store.
"""

from __future__ import annotations

import uuid

from flask import Flask, current_app, session

from .drafts import Draft, DraftStore
from .editor import BulkFixResult, EditorError, StaleDraftError
from .presentation import StatementsSummary, border_variant, render_export, summarize

DRAFTS_EXTENSION_KEY = "review_drafts"
SESSION_TOKEN_KEY = "draft_token"

__all__ = [
    "BulkFixResult",
    "Draft",
    "DraftStore",
    "EditorError",
    "StaleDraftError",
    "StatementsSummary",
    "border_variant",
    "get_draft_store",
    "init_draft_store",
    "render_export",
    "session_token",
    "summarize",
]


def init_draft_store(app: Flask) -> DraftStore:
    store = DraftStore(
        ttl_seconds=app.config.get("DRAFT_TTL_SECONDS", 3600),
        max_entries=app.config.get("DRAFT_MAX_ENTRIES", 256),
    )
    app.extensions[DRAFTS_EXTENSION_KEY] = store
    return store


def get_draft_store(app: Flask | None = None) -> DraftStore:
    app = app or current_app._get_current_object()
    store = app.extensions.get(DRAFTS_EXTENSION_KEY)
    if store is None:
        store = init_draft_store(app)
    return store


def session_token() -> str:
    """Return this browser's draft token, minting one on first use."""
    token = session.get(SESSION_TOKEN_KEY)
    if not token:
        token = uuid.uuid4().hex
        session[SESSION_TOKEN_KEY] = token
    return token
