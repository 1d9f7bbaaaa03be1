"""Main application entry point for the FastAPI application.

Run with ``uvicorn warden.main:app``.
"""

from warden.core.application import create_application
from warden.core.initialization import initialize_application

initialize_application()

app = create_application()
