"""Tests for summary counts, export text and template helpers"""

import pytest

from review_console.models import ImportRecord, Issue, Statement
from review_console.services.presentation import (
    border_variant,
    hyperlink_text,
    render_export,
    summarize,
    textarea_rows,
    time_ago,
)

NOW = 1_700_000_000


def test_summarize_splits_info_from_required(import_payload):
    record = ImportRecord.from_dict(import_payload)

    summary = summarize(record.statements)

    assert summary.statements == 4
    assert summary.fixes_required == 2
    assert summary.optional_audits == 1
    assert summary.as_dict() == {"statements": 4, "fixes_required": 2, "optional_audits": 1}


def test_summarize_empty():
    summary = summarize([])
    assert (summary.statements, summary.fixes_required, summary.optional_audits) == (0, 0, 0)


@pytest.mark.parametrize(
    "levels, expected",
    [
        ([], None),
        (["info"], "info"),
        (["info", "info"], "info"),
        (["info", "warning"], "danger"),
        (["danger"], "danger"),
    ],
)
def test_border_variant(levels, expected):
    issues = [Issue(level=level, text="x") for level in levels]
    assert border_variant(issues) == expected


def test_render_export_formats_each_statement():
    statements = [
        Statement(original="  CREATE TABLE t (\n  id int\n);  ", cockroach="  CREATE TABLE t (id INT8);\n"),
        Statement(original="CREATE TRIGGER x;", cockroach="CREATE TRIGGER x;", deleted=True),
    ]

    exported = render_export(statements)

    assert exported == (
        "-- postgres: CREATE TABLE t (   id int );\n"
        "CREATE TABLE t (id INT8);\n\n"
        "-- postgres: CREATE TRIGGER x;\n"
        "-- statement ignored\n\n"
    )


def test_render_export_empty():
    assert render_export([]) == ""


def test_hyperlink_text_links_urls_and_escapes_the_rest():
    rendered = hyperlink_text("see <b>docs</b> at https://www.cockroachlabs.com/docs/stable/")

    assert "&lt;b&gt;docs&lt;/b&gt;" in rendered
    assert '<a href="https://www.cockroachlabs.com/docs/stable/" target="_blank" rel="noreferrer">' in rendered


def test_hyperlink_text_leaves_plain_words():
    assert str(hyperlink_text("no links here")) == "no links here"


def test_hyperlink_text_links_url_inside_a_word():
    rendered = str(hyperlink_text("docs:https://www.cockroachlabs.com/docs/stable/"))

    assert rendered == (
        'docs:<a href="https://www.cockroachlabs.com/docs/stable/" target="_blank" rel="noreferrer">'
        "https://www.cockroachlabs.com/docs/stable/</a>"
    )


def test_hyperlink_text_keeps_closing_bracket_outside_link():
    rendered = str(hyperlink_text("(see https://github.com/cockroachdb/cockroach/issues/24897)"))

    assert rendered.startswith("(see <a ")
    assert 'href="https://github.com/cockroachdb/cockroach/issues/24897"' in rendered
    assert rendered.endswith("</a>)")


def test_textarea_rows_counts_lines():
    assert textarea_rows(Statement(cockroach="a\nb\nc")) == 4
    assert textarea_rows(Statement(cockroach="")) == 2


class TestTimeAgo:
    def _nanos(self, seconds_before):
        return (NOW - seconds_before) * 1_000_000_000

    def test_zero_is_never(self):
        assert time_ago(0, now=NOW) == "never"

    def test_recent_is_just_now(self):
        assert time_ago(self._nanos(3), now=NOW) == "just now"

    def test_future_timestamp(self):
        assert time_ago(self._nanos(-120), now=NOW) == "in the future"

    @pytest.mark.parametrize(
        "seconds, expected",
        [
            (45, "45 seconds ago"),
            (60, "1 minute ago"),
            (300, "5 minutes ago"),
            (7200, "2 hours ago"),
            (86400, "1 day ago"),
        ],
    )
    def test_units(self, seconds, expected):
        assert time_ago(self._nanos(seconds), now=NOW) == expected
