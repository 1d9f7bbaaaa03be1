"""Application factory for creating and configuring the FastAPI application."""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from warden.adapters.api.v1 import api_router
from warden.core.config.settings import settings
from warden.core.handlers import register_exception_handlers
from warden.core.lifecycle import create_lifespan_manager


def create_application(with_lifespan: bool = True) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        with_lifespan: Attach the startup/shutdown manager. Tests that wire
            their own database disable it.

    Returns:
        FastAPI: The configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Credential and session authority.",
        lifespan=create_lifespan_manager() if with_lifespan else None,
        default_response_class=JSONResponse,
    )

    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api/v1")

    return app
