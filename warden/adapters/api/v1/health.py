from datetime import datetime, timezone

from fastapi import APIRouter, Request
from pydantic import BaseModel

from warden.core.config.settings import settings
from warden.utils.i18n import get_request_language, get_translated_message

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    env: str
    message: str
    timestamp: datetime


@router.get("", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Liveness probe. Does not touch the database."""
    return HealthResponse(
        status="ok",
        env=settings.APP_ENV,
        message=get_translated_message("health_status_ok", get_request_language(request)),
        timestamp=datetime.now(timezone.utc),
    )
