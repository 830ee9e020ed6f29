import logging

import anyio
from fastapi import APIRouter, Query, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError
from sse_starlette.sse import EventSourceResponse
from starlette.requests import ClientDisconnect
from starlette.types import Receive, Scope, Send

from ...core.config import settings
from ...core.exceptions import InvalidRequestError
from ...models.schemas import SendRequest
from ...services.relay import StreamSession, chat_relay

router = APIRouter(tags=["Chat"])
logger = logging.getLogger(__name__)


class SessionEventSourceResponse(EventSourceResponse):
    """
    SSE response that releases its subscription however the response ends.

    The upstream is opened before the response runs, so a client that is
    gone before the first record is read would otherwise leave it open.
    """

    def __init__(self, session: StreamSession, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.session = session

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            with anyio.CancelScope(shield=True):
                await chat_relay.release(self.session)


@router.post("/send", response_class=PlainTextResponse)
async def send_message(request: Request) -> PlainTextResponse:
    """
    Forward a chat message to the pub/sub service.

    The body is parsed by hand so that malformed input yields 400 rather
    than FastAPI's 422, and so the content type does not matter.
    """
    try:
        body = await request.body()
    except ClientDisconnect:
        raise InvalidRequestError("Cannot read body")

    try:
        payload = SendRequest.model_validate_json(body)
    except ValidationError:
        raise InvalidRequestError("Invalid JSON")

    await chat_relay.publish(payload.topic, payload.message)
    return PlainTextResponse("Message sent successfully")


@router.get("/receive")
async def receive_messages(
    request: Request,
    topic: str = Query(
        "",
        description="Topic to subscribe to"
    ),
) -> EventSourceResponse:
    """
    Stream messages for a topic via Server-Sent Events (SSE).

    Each chunk read from the pub/sub service is sent as one
    `data: <chunk>` record, in order, until either side disconnects.
    """
    if not topic:
        raise InvalidRequestError("Missing topic")

    session = await chat_relay.subscribe(topic, check_disconnected=request.is_disconnected)

    return SessionEventSourceResponse(
        session,
        chat_relay.create_stream(session),
        headers={"Cache-Control": "no-cache"},
        ping=settings.stream_ping_interval,
        sep="\n",
    )
