from fastapi import APIRouter

from ...core.config import settings
from ...models.schemas import HealthResponse
from ...services.relay import chat_relay

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns service status, the configured upstream and active streams count.
    """
    return HealthResponse(
        status="healthy" if chat_relay.client is not None else "degraded",
        upstream=settings.pubsub_url,
        active_streams=len(chat_relay.active_sessions),
    )
