"""Application initialization and setup.

Loads environment variables, validates settings, configures logging and
loads translations before the application is created.
"""

from dotenv import load_dotenv

from warden.core.config.settings import settings
from warden.core.logging import configure_logging
from warden.utils.i18n import setup_i18n


def initialize_application() -> None:
    """Initialize the application with all necessary setup tasks.

    Raises:
        ValueError: If deployment-critical settings are missing.
    """
    load_dotenv(override=False)

    configure_logging(log_level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)

    settings.validate_required_fields()

    setup_i18n()
