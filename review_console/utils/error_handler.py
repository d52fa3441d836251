# review_console/utils/error_handler.py
"""
Error handlers for backend failures and HTTP errors.

Backend failures raised inside HTML views become a flashed ``Error: ...``
message and a redirect back to where the operator came from; JSON requests
receive an ``{"error": ...}`` body instead.
"""

from http import HTTPStatus

from flask import current_app, flash, jsonify, redirect, render_template, request, url_for

from review_console.client import BackendError, BackendResponseError, BackendUnavailableError


def wants_json():
    if request.path.startswith("/api/"):
        return True
    best = request.accept_mimetypes.best_match(["application/json", "text/html"])
    return best == "application/json" and request.accept_mimetypes[best] > request.accept_mimetypes["text/html"]


def backend_error_status(error):
    """Map a backend failure to the status code the console reports."""
    if isinstance(error, BackendUnavailableError):
        return HTTPStatus.SERVICE_UNAVAILABLE
    if isinstance(error, BackendResponseError) and error.status_code == HTTPStatus.NOT_FOUND:
        return HTTPStatus.NOT_FOUND
    return HTTPStatus.BAD_GATEWAY


def init_error_handlers(app):
    """Register application-wide error handlers"""

    @app.errorhandler(BackendError)
    def handle_backend_error(error):
        current_app.logger.error(
            f"Migration backend error on {request.method} {request.path}: {error}",
            extra={"error_type": type(error).__name__},
        )
        status = backend_error_status(error)
        if wants_json():
            return jsonify({"error": str(error)}), status
        flash(f"Error: {error}", "danger")
        referrer = request.referrer or ""
        if request.method == "POST" and referrer.startswith(request.host_url):
            return redirect(referrer)
        return redirect(url_for("home"))

    @app.errorhandler(404)
    def not_found_error(error):
        if wants_json():
            return jsonify({"error": "Not found"}), HTTPStatus.NOT_FOUND
        return render_template("errors/404.html"), HTTPStatus.NOT_FOUND

    @app.errorhandler(413)
    def too_large_error(error):
        limit = current_app.config.get("MAX_UPLOAD_MB", 100)
        if wants_json():
            return jsonify({"error": f"Upload exceeds {limit} MB"}), HTTPStatus.REQUEST_ENTITY_TOO_LARGE
        flash(f"Error: upload exceeds the {limit} MB limit.", "danger")
        return redirect(url_for("home"))

    @app.errorhandler(500)
    def internal_error(error):
        current_app.logger.error(f"Unhandled error on {request.method} {request.path}: {error}")
        if wants_json():
            return jsonify({"error": "Internal server error"}), HTTPStatus.INTERNAL_SERVER_ERROR
        return render_template("errors/500.html"), HTTPStatus.INTERNAL_SERVER_ERROR
