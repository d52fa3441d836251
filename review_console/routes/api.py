# review_console/routes/api.py

"""
API routes for AJAX/JSON endpoints
"""

from http import HTTPStatus

from flask import current_app, jsonify

from review_console.client import get_backend_client
from review_console.routes.imports import load_draft
from review_console.services import summarize


def register_api_routes(app):
    """Register API routes"""

    @app.route("/api/imports/<import_id>", methods=["GET"])
    def api_import_draft(import_id):
        """
        Return this session's draft for an import, including its revision
        and statement summary.
        """
        draft = load_draft(import_id)
        payload = draft.record.to_dict()
        payload["revision"] = draft.revision
        payload["summary"] = summarize(draft.record.statements).as_dict()
        return jsonify(payload)

    @app.route("/api/imports/<import_id>/summary", methods=["GET"])
    def api_import_summary(import_id):
        """Statement and issue counts for the draft."""
        draft = load_draft(import_id)
        metadata = draft.record.import_metadata
        current_app.logger.debug(f"Summary requested for import {import_id}")
        return jsonify(
            {
                "id": draft.record.id or import_id,
                "status": metadata.status,
                "message": metadata.message,
                "database": metadata.database,
                **summarize(metadata.statements).as_dict(),
            }
        )

    @app.route(app.config.get("HEALTH_CHECK_ENDPOINT", "/health"), methods=["GET"])
    def health_check():
        """Liveness plus migration backend reachability."""
        client = get_backend_client()
        backend_ok = client.ping()
        payload = {
            "status": "healthy" if backend_ok else "degraded",
            "backend": {"url": client.base_url, "reachable": backend_ok},
        }
        status = HTTPStatus.OK if backend_ok else HTTPStatus.SERVICE_UNAVAILABLE
        return jsonify(payload), status
