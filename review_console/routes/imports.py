"""
Review screen routes: list, edit, export and ad-hoc SQL for a single import.
"""

from __future__ import annotations

from http import HTTPStatus

from flask import (
    Blueprint,
    Response,
    abort,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    url_for,
)

from review_console.client import BackendError, get_backend_client
from review_console.forms import ActionParseError, EditorAction, SQLExecForm, StatementsForm, parse_action
from review_console.services import (
    Draft,
    EditorError,
    StaleDraftError,
    get_draft_store,
    render_export,
    session_token,
    summarize,
)
from review_console.services import editor
from review_console.utils.error_handler import backend_error_status

imports_blueprint = Blueprint("imports", __name__, url_prefix="/import")

_STALE_FORM_MESSAGE = (
    "The page was out of date, so your latest text edits were not applied. Review the statements and try again."
)
_EXPIRED_DRAFT_MESSAGE = "Your editing session expired; the migration was reloaded from the server."


def load_draft(import_id: str, *, refresh: bool = False) -> Draft:
    """Return this browser's draft for ``import_id``, fetching it from the backend when missing."""
    store = get_draft_store()
    token = session_token()
    draft = None if refresh else store.get(token, import_id)
    if draft is None:
        record = get_backend_client().get_import(import_id)
        draft = store.put(token, import_id, record)
        current_app.logger.info(
            "Loaded import draft from backend",
            extra={"import_id": import_id, "statement_count": len(record.statements)},
        )
    return draft


def _detail_url(import_id: str, index: int | None = None) -> str:
    if index is None:
        return url_for("imports.import_detail", import_id=import_id)
    return url_for("imports.import_detail", import_id=import_id, _anchor=f"statement-{index}")


def _build_statements_form(draft: Draft) -> StatementsForm:
    return StatementsForm(
        formdata=None,
        data={
            "revision": draft.revision,
            "statements": [statement.display_text for statement in draft.record.statements],
        },
    )


@imports_blueprint.get("/<import_id>")
def import_detail(import_id: str):
    try:
        draft = load_draft(import_id)
    except BackendError as exc:
        current_app.logger.error(f"Failed to load import {import_id}: {exc}")
        flash(f"Error: {exc}", "danger")
        return (
            render_template("imports/detail.html", import_id=import_id, draft=None, record=None, form=None),
            backend_error_status(exc),
        )

    record = draft.record
    return render_template(
        "imports/detail.html",
        import_id=import_id,
        draft=draft,
        record=record,
        summary=summarize(record.statements),
        form=_build_statements_form(draft),
    )


@imports_blueprint.post("/<import_id>/action")
def import_action(import_id: str):
    form = StatementsForm()
    store = get_draft_store()
    token = session_token()
    draft = store.get(token, import_id)
    if draft is None:
        flash(_EXPIRED_DRAFT_MESSAGE, "warning")
        return redirect(_detail_url(import_id))

    if not form.validate_on_submit():
        for field_errors in form.errors.values():
            for error in field_errors:
                flash(f"Error: {error}", "danger")
        return redirect(_detail_url(import_id))

    try:
        action = parse_action(form.action.data)
    except ActionParseError as exc:
        flash(f"Error: {exc}", "danger")
        return redirect(_detail_url(import_id))

    if not store.claim(draft, form.revision.data):
        current_app.logger.warning(
            "Discarding edits from stale review form",
            extra={"import_id": import_id, "form_revision": form.revision.data, "draft_revision": draft.revision},
        )
        flash(_STALE_FORM_MESSAGE, "warning")
        return redirect(_detail_url(import_id))

    try:
        editor.apply_text_edits(draft.record, form.statements.data)
    except StaleDraftError as exc:
        current_app.logger.warning(f"Review form does not match draft for {import_id}: {exc}")
        flash(_STALE_FORM_MESSAGE, "warning")
        return redirect(_detail_url(import_id))

    try:
        return _dispatch(import_id, draft, action)
    except EditorError as exc:
        flash(f"Error: {exc}", "danger")
    except BackendError as exc:
        current_app.logger.error(
            f"Backend call failed for action {action.name} on {import_id}: {exc}",
            extra={"import_id": import_id, "editor_action": action.name},
        )
        flash(f"Error: {exc}", "danger")
    return redirect(_detail_url(import_id, action.index))


def _dispatch(import_id: str, draft: Draft, action: EditorAction):
    store = get_draft_store()
    token = session_token()
    record = draft.record
    name = action.name

    if name == "reimport":
        updated = get_backend_client().put_import(record)
        store.put(token, import_id, updated)
        current_app.logger.info(
            "Reimport submitted",
            extra={"import_id": import_id, "statement_count": len(updated.statements)},
        )
        return redirect(_detail_url(import_id))

    if name == "undo_all":
        load_draft(import_id, refresh=True)
        return redirect(_detail_url(import_id))

    target_index = action.index
    if name == "fix_all":
        flash(editor.fix_all(record, get_backend_client()).message, "info")
    elif name == "fix_sequences":
        flash(editor.fix_all_sequences(record, get_backend_client()).message, "info")
    elif name == "delete_unimplemented":
        flash(editor.delete_all_unimplemented(record).message, "info")
    elif name == "insert_before":
        editor.insert_statement(record, action.index)
    elif name == "insert_after":
        editor.insert_statement(record, action.index + 1)
        target_index = action.index + 1
    elif name == "delete":
        editor.soft_delete(record, action.index)
    elif name == "fix_sequence":
        editor.fix_sequence(record, action.index, action.argument, get_backend_client())
    elif name == "add_user":
        flash(editor.add_user(record, action.argument).message, "info")
        target_index = 0
    elif name == "export":
        return redirect(url_for("imports.import_export", import_id=import_id))
    elif name in ("execute_sql", "execute"):
        if action.index is not None and action.index >= len(record.statements):
            raise EditorError(f"Statement index {action.index} is out of range.")
        return redirect(url_for("imports.import_sql", import_id=import_id, statement=action.index))

    return redirect(_detail_url(import_id, target_index))


@imports_blueprint.get("/<import_id>/export")
def import_export(import_id: str):
    draft = load_draft(import_id)
    text = render_export(draft.record.statements)
    if request.args.get("format") == "raw":
        return Response(
            text,
            mimetype="text/plain",
            headers={"Content-Disposition": f'attachment; filename="{import_id}.export.sql"'},
        )
    return render_template("imports/export.html", import_id=import_id, record=draft.record, export_text=text)


@imports_blueprint.route("/<import_id>/sql", methods=["GET", "POST"])
def import_sql(import_id: str):
    draft = load_draft(import_id)
    record = draft.record
    if not record.import_metadata.has_database:
        flash("Error: this import has no temporary database to execute against.", "danger")
        return redirect(_detail_url(import_id))

    if request.method == "GET":
        prefill = ""
        statement_index = request.args.get("statement", type=int)
        if statement_index is not None:
            if statement_index < 0 or statement_index >= len(record.statements):
                abort(HTTPStatus.NOT_FOUND)
            prefill = record.statements[statement_index].cockroach
        form = SQLExecForm(formdata=None, data={"sql": prefill})
        return render_template("imports/sql.html", import_id=import_id, record=record, form=form, result=None)

    form = SQLExecForm()
    result = None
    status = HTTPStatus.OK
    if form.validate_on_submit():
        try:
            result = get_backend_client().execute_sql(record.import_metadata.database, form.sql.data)
        except BackendError as exc:
            current_app.logger.error(f"SQL execution failed for {import_id}: {exc}")
            flash(f"Error: {exc}", "danger")
            status = backend_error_status(exc)
    else:
        status = HTTPStatus.BAD_REQUEST
    return (
        render_template("imports/sql.html", import_id=import_id, record=record, form=form, result=result),
        status,
    )
