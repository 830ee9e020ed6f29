"""
Chat Gateway - Main FastAPI Application

This service sits between browser chat clients and a separate pub/sub
service. It does not route or store messages itself.

Key Features:
- POST /send forwards a chat message to the pub/sub service
- GET /receive relays a topic subscription as Server-Sent Events (SSE)
- Permissive CORS for the browser frontend
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from . import __version__
from .api import router
from .core.config import settings
from .core.cors import CORSHeadersMiddleware
from .core.exceptions import RelayError
from .services.relay import chat_relay

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup (create the upstream client) and shutdown (stop streams).
    """
    logger.info(f"Starting Chat Gateway on port {settings.service_port}")
    await chat_relay.initialize()

    yield

    logger.info("Shutting down Chat Gateway")
    await chat_relay.shutdown()
    logger.info("Chat Gateway shutdown complete")


app = FastAPI(
    title="Chat Gateway",
    description="HTTP gateway relaying chat messages to a pub/sub service",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(CORSHeadersMiddleware)

app.include_router(router)


@app.get("/", tags=["Info"])
async def root() -> Dict[str, str]:
    """Root endpoint with service info."""
    return {
        "service": settings.service_name,
        "version": __version__,
        "docs": "/docs",
    }


@app.exception_handler(RelayError)
async def relay_exception_handler(request: Request, exc: RelayError) -> PlainTextResponse:
    """Relay errors become plain-text responses with the error's status."""
    return PlainTextResponse(exc.detail, status_code=exc.status_code)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled error: {exc}", exc_info=True)
    detail = str(exc) if settings.debug else "Internal server error"
    return PlainTextResponse(detail, status_code=500)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.service_port)
