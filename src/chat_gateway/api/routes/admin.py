from fastapi import APIRouter

from ...models.schemas import StreamInfo, StreamListResponse
from ...services.relay import chat_relay

router = APIRouter(tags=["Admin"])


@router.get("/streams", response_model=StreamListResponse)
async def list_streams() -> StreamListResponse:
    """
    List all active SSE streams.

    Note: This endpoint should be protected in production.
    """
    return StreamListResponse(
        count=len(chat_relay.active_sessions),
        streams=[
            StreamInfo(
                session_id=session.session_id,
                topic=session.topic,
                started_at=session.started_at,
            )
            for session in chat_relay.active_sessions.values()
        ],
    )
