# review_console/utils/template_filters.py
"""
Jinja filters and context for the review templates
"""

from review_console.services.presentation import border_variant, hyperlink_text, textarea_rows, time_ago


def init_template_helpers(app):
    """Register template filters and the shared template context"""
    app.add_template_filter(hyperlink_text, "hyperlink")
    app.add_template_filter(time_ago, "time_ago")
    app.add_template_filter(textarea_rows, "textarea_rows")
    app.add_template_filter(border_variant, "border_variant")

    @app.context_processor
    def console_context():
        return {
            "app_name": app.config.get("APP_NAME", "CockroachDB Importer"),
            "footer_quote": app.config.get("APP_FOOTER_QUOTE", ""),
        }
