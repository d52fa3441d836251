# review_console/routes/__init__.py
"""
Application routes package
"""

from .api import register_api_routes
from .home import register_home_routes
from .imports import imports_blueprint


def init_routes(app):
    """Initialize all application routes"""
    register_home_routes(app)
    app.register_blueprint(imports_blueprint)
    register_api_routes(app)
