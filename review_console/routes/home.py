# review_console/routes/home.py
"""
Landing page: upload a PostgreSQL dump for conversion
"""

from flask import current_app, flash, redirect, render_template, url_for
from werkzeug.utils import secure_filename

from review_console.client import BackendError, get_backend_client
from review_console.forms import UploadForm
from review_console.services import get_draft_store, session_token

DEFAULT_UPLOAD_NAME = "upload.sql"


def register_home_routes(app):
    """Register upload routes"""

    @app.route("/", methods=["GET", "POST"])
    def home():
        """Upload a dump and jump to its review screen"""
        form = UploadForm()

        if form.validate_on_submit():
            file_storage = form.file.data
            filename = secure_filename(file_storage.filename or "") or DEFAULT_UPLOAD_NAME
            try:
                record = get_backend_client().upload(
                    file_storage.stream,
                    filename,
                    content_type=file_storage.mimetype or None,
                )
            except BackendError as e:
                current_app.logger.error(f"Upload of {filename} failed: {str(e)}")
                flash(f"Error: {str(e)}", "danger")
                return render_template("home.html", form=form), 502

            import_id = record.id or filename
            get_draft_store().put(session_token(), import_id, record)
            current_app.logger.info(
                f"Uploaded {filename} as import {import_id}",
                extra={"import_id": import_id, "statement_count": len(record.statements)},
            )
            return redirect(url_for("imports.import_detail", import_id=import_id))

        for error in form.file.errors:
            flash(error, "danger")
        return render_template("home.html", form=form)
