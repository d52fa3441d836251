# review_console/forms/editor.py
"""
Forms for reviewing and editing migration statements
"""

from dataclasses import dataclass
from typing import Optional

from flask import current_app
from flask_wtf import FlaskForm
from flask_wtf.file import FileField, FileRequired, FileSize
from wtforms import FieldList, HiddenField, IntegerField, SubmitField, TextAreaField
from wtforms.validators import DataRequired, InputRequired, Length

# Actions that apply to the whole draft
GLOBAL_ACTIONS = (
    "reimport",
    "undo_all",
    "fix_all",
    "delete_unimplemented",
    "fix_sequences",
    "export",
    "execute_sql",
)

# Actions that target one statement, encoded as "<name>:<index>[:<argument>]"
STATEMENT_ACTIONS = (
    "insert_before",
    "insert_after",
    "delete",
    "execute",
)
ARGUMENT_ACTIONS = (
    "fix_sequence",
    "add_user",
)


class ActionParseError(ValueError):
    """Raised when a submitted action button value cannot be interpreted."""


@dataclass(frozen=True)
class EditorAction:
    name: str
    index: Optional[int] = None
    argument: Optional[str] = None


def parse_action(raw: str) -> EditorAction:
    """Decode the value of the submit button that was pressed."""
    value = (raw or "").strip()
    if not value:
        raise ActionParseError("No action was submitted.")

    name, _, remainder = value.partition(":")
    if name in GLOBAL_ACTIONS:
        if remainder:
            raise ActionParseError(f"Action '{name}' does not take arguments.")
        return EditorAction(name=name)

    if name not in STATEMENT_ACTIONS and name not in ARGUMENT_ACTIONS:
        raise ActionParseError(f"Unknown action '{name}'.")

    index_text, _, argument = remainder.partition(":")
    try:
        index = int(index_text)
    except ValueError:
        raise ActionParseError(f"Action '{name}' requires a statement index.") from None
    if index < 0:
        raise ActionParseError(f"Action '{name}' requires a non-negative statement index.")

    if name in ARGUMENT_ACTIONS:
        if not argument:
            raise ActionParseError(f"Action '{name}' requires an argument.")
        return EditorAction(name=name, index=index, argument=argument)

    if argument:
        raise ActionParseError(f"Action '{name}' does not take an argument.")
    return EditorAction(name=name, index=index)


class StatementsForm(FlaskForm):
    """The review screen: one textarea per statement plus the pressed action"""

    revision = IntegerField("Revision", validators=[InputRequired(message="Draft revision is missing.")])
    statements = FieldList(TextAreaField("CockroachDB statement"))
    action = HiddenField("Action", validators=[DataRequired(message="No action was submitted.")])


class UploadForm(FlaskForm):
    """Form for uploading a PostgreSQL dump"""

    file = FileField("Choose file", validators=[FileRequired(message="Choose a file to import.")])
    submit = SubmitField("Import")

    def validate_file(self, field):
        """Enforce MAX_UPLOAD_MB on the file itself, read from config at validation time"""
        limit_mb = current_app.config.get("MAX_UPLOAD_MB", 100)
        FileSize(
            max_size=limit_mb * 1024 * 1024,
            message=f"File is larger than the {limit_mb} MB upload limit.",
        )(self, field)


class SQLExecForm(FlaskForm):
    """Form for executing raw SQL against the temporary database"""

    sql = TextAreaField(
        "SQL",
        validators=[
            DataRequired(message="Enter a statement to execute."),
            Length(max=1_000_000, message="Statement is too long."),
        ],
    )
    submit = SubmitField("Execute")
