import asyncio
import logging
from contextlib import aclosing
from datetime import datetime, timezone
from typing import AsyncGenerator, AsyncIterator, Awaitable, Callable, Dict, Optional
from uuid import uuid4

import anyio
import httpx

from ..core.config import settings
from ..core.exceptions import UpstreamStatusError, UpstreamUnavailableError

logger = logging.getLogger(__name__)

# Callable that reports whether the downstream client has gone away
DisconnectCheck = Callable[[], Awaitable[bool]]


def format_record(chunk: bytes) -> bytes:
    """Wrap one upstream chunk as a single event-stream record."""
    return b"data: " + chunk + b"\n\n"


class UpstreamStream:
    """
    Streaming upstream response that is closed at most once.

    Both the relay loop and the disconnect watcher may try to close the
    response; whichever comes second is a no-op.
    """

    def __init__(self, response: httpx.Response):
        self._response = response
        self._closed = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def aiter_chunks(self) -> AsyncIterator[bytes]:
        return self._response.aiter_raw()

    async def aclose(self) -> bool:
        """
        Close the upstream response.

        Returns:
            True if this call closed the response, False if it was already closed
        """
        if self._closed.is_set():
            return False
        self._closed.set()
        try:
            await self._response.aclose()
        except Exception as e:
            logger.debug(f"Error closing upstream response: {e}")
        return True


class StreamSession:
    """
    One subscription: an upstream byte stream tied to one downstream client.

    The relay loop reads a chunk and yields a record, strictly alternating.
    A watcher task waits for the client to disconnect (or for cancel()) and
    closes the upstream so a blocked read returns.
    """

    def __init__(
        self,
        topic: str,
        upstream: UpstreamStream,
        check_disconnected: Optional[DisconnectCheck] = None,
        poll_interval: float = 0.5,
    ):
        self.session_id = str(uuid4())
        self.topic = topic
        self.started_at = datetime.now(timezone.utc)
        self.upstream = upstream
        self.cancel_event = asyncio.Event()
        self.watcher: Optional[asyncio.Task] = None
        self._check_disconnected = check_disconnected
        self._poll_interval = poll_interval

    def cancel(self) -> None:
        """Ask the session to stop; the watcher closes the upstream."""
        self.cancel_event.set()

    async def _watch_disconnect(self) -> None:
        while not self.cancel_event.is_set():
            if self._check_disconnected and await self._check_disconnected():
                logger.info(f"Client of stream {self.session_id} disconnected")
                self.cancel_event.set()
                break
            try:
                await asyncio.wait_for(self.cancel_event.wait(), timeout=self._poll_interval)
            except asyncio.TimeoutError:
                pass

        await self.upstream.aclose()

    async def relay(self) -> AsyncGenerator[bytes, None]:
        """
        Yield one event-stream record per upstream chunk until either side goes away.

        Chunk boundaries are kept as the transport delivers them; a chunk holding
        several logical messages, or part of one, is forwarded as-is.
        """
        self.watcher = asyncio.create_task(self._watch_disconnect())
        try:
            async for chunk in self.upstream.aiter_chunks():
                if chunk:
                    yield format_record(chunk)
        except Exception as e:
            # EOF, transport errors and reads on a closed response all end the stream
            if self.cancel_event.is_set():
                logger.debug(f"Upstream read for stream {self.session_id} stopped after cancel: {e}")
            else:
                logger.warning(f"Upstream stream for topic {self.topic} ended with error: {e}")
        finally:
            with anyio.CancelScope(shield=True):
                await self.close()

    async def close(self) -> None:
        """Close the upstream and wait for the watcher to finish."""
        await self.upstream.aclose()

        if self.watcher is None:
            return
        if not self.cancel_event.is_set():
            self.watcher.cancel()
        try:
            await self.watcher
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.warning(f"Disconnect watcher for stream {self.session_id} failed: {e}")


class ChatRelay:
    """
    Forwards chat traffic to the pub/sub service.

    Owns the shared upstream HTTP client and the registry of active
    subscription streams. Singleton-like; created once per process and
    initialized from the application lifespan.
    """

    def __init__(self):
        self.client: Optional[httpx.AsyncClient] = None
        # Active SSE streams: session_id -> session
        self.active_sessions: Dict[str, StreamSession] = {}

    async def initialize(self, pubsub_url: Optional[str] = None) -> None:
        """Create the upstream HTTP client."""
        if self.client is not None and not self.client.is_closed:
            return

        base_url = (pubsub_url or settings.pubsub_url).rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(settings.publish_timeout, connect=settings.connect_timeout),
        )
        logger.info(f"Relaying to pub/sub service at {base_url}")

    async def shutdown(self) -> None:
        """Stop all active streams and close the upstream client."""
        for session_id in list(self.active_sessions.keys()):
            session = self.active_sessions.pop(session_id, None)
            if session is not None:
                session.cancel()

        if self.client is not None:
            await self.client.aclose()
            self.client = None

    def _require_client(self) -> httpx.AsyncClient:
        if self.client is None:
            raise RuntimeError("Chat relay not initialized")
        return self.client

    async def publish(self, topic: str, message: str) -> None:
        """
        Publish a chat message to the pub/sub service.

        Raises:
            UpstreamUnavailableError: If the pub/sub service could not be reached
            UpstreamStatusError: If the pub/sub service did not answer 200
        """
        client = self._require_client()

        try:
            response = await client.post(
                "/publish",
                json={"topic": topic, "message": message},
            )
        except httpx.HTTPError as e:
            logger.error(f"Failed to reach pub/sub service for topic {topic}: {e}")
            raise UpstreamUnavailableError("Failed to publish message") from e

        if response.status_code != 200:
            logger.warning(f"Pub/sub service rejected publish to {topic}: {response.status_code}")
            raise UpstreamStatusError("Failed to publish message", status_code=response.status_code)

        logger.info(f"Published message to topic {topic}")

    async def subscribe(
        self,
        topic: str,
        check_disconnected: Optional[DisconnectCheck] = None,
    ) -> StreamSession:
        """
        Open a long-lived subscription on the pub/sub service.

        Args:
            topic: Topic to subscribe to
            check_disconnected: Awaitable predicate for the client disconnect signal

        Returns:
            A session whose relay() yields event-stream records

        Raises:
            UpstreamUnavailableError: If the subscription could not be opened
        """
        client = self._require_client()

        request = client.build_request(
            "GET",
            "/subscribe",
            params={"topic": topic},
            timeout=httpx.Timeout(None, connect=settings.connect_timeout),
        )
        try:
            response = await client.send(request, stream=True)
        except httpx.HTTPError as e:
            logger.error(f"Failed to subscribe to topic {topic}: {e}")
            raise UpstreamUnavailableError("Failed to subscribe to topic") from e

        session = StreamSession(
            topic=topic,
            upstream=UpstreamStream(response),
            check_disconnected=check_disconnected,
            poll_interval=settings.disconnect_poll_interval,
        )
        logger.info(f"Opened stream {session.session_id} for topic {topic}")
        return session

    async def create_stream(self, session: StreamSession) -> AsyncGenerator[bytes, None]:
        """Relay a session's records while tracking it as active."""
        self.active_sessions[session.session_id] = session
        try:
            async with aclosing(session.relay()) as records:
                async for record in records:
                    yield record
        finally:
            self.active_sessions.pop(session.session_id, None)
            logger.info(f"Closed stream {session.session_id} for topic {session.topic}")

    async def release(self, session: StreamSession) -> None:
        """
        Drop a session and close its upstream.

        Safe whether or not the session's stream ever started, and whether or
        not it already finished; the SSE response calls it once it is done with
        the client.
        """
        self.active_sessions.pop(session.session_id, None)
        await session.close()


# Global instance
chat_relay = ChatRelay()
