# app.py

import logging
import os

from dotenv import load_dotenv
from flask import Flask

# Load environment variables from .env file first
load_dotenv()

# Module imports after load_dotenv() - E402 is intentional
from config import DevelopmentConfig, ProductionConfig, TestingConfig  # noqa: E402
from config.monitoring import (  # noqa: E402
    DevelopmentMonitoringConfig,
    ProductionMonitoringConfig,
    TestingMonitoringConfig,
)
from config.validation import validate_and_exit  # noqa: E402
from review_console.cli import init_cli  # noqa: E402
from review_console.client import init_backend_client  # noqa: E402
from review_console.routes import init_routes  # noqa: E402
from review_console.services import init_draft_store  # noqa: E402
from review_console.utils.error_handler import init_error_handlers  # noqa: E402
from review_console.utils.logging_config import setup_logging  # noqa: E402
from review_console.utils.template_filters import init_template_helpers  # noqa: E402

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Validate environment variables (only in production)
flask_env = os.environ.get("FLASK_ENV", "development")
if flask_env == "production":
    validate_and_exit(flask_env)

# Load configuration based on the environment
if flask_env == "production":
    app.config.from_object(ProductionConfig)
    app.config.from_object(ProductionMonitoringConfig)
elif flask_env == "testing":
    app.config.from_object(TestingConfig)
    app.config.from_object(TestingMonitoringConfig)
else:
    app.config.from_object(DevelopmentConfig)
    app.config.from_object(DevelopmentMonitoringConfig)

# Initialize logging first so extension setup is captured
setup_logging(app)

# Initialize extensions
init_backend_client(app)
init_draft_store(app)
init_template_helpers(app)
init_error_handlers(app)
init_cli(app)

# Initialize routes
init_routes(app)

logger.debug("Review console initialised for %s", app.config["MIGRATION_BACKEND_URL"])


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port)
