"""
Chat Gateway CLI - Main entry point.

Commands:
    chat-gateway serve    - Run the gateway under uvicorn
    chat-gateway version  - Show the gateway version
"""

from typing import Optional

import typer
import uvicorn

from .core.config import settings

app = typer.Typer(
    name="chat-gateway",
    help="Chat Gateway - relay chat messages to a pub/sub service.",
    no_args_is_help=True,
)


@app.command()
def serve(
    host: Optional[str] = typer.Option(
        None,
        "--host",
        help="Interface to bind (default: HOST or 0.0.0.0).",
    ),
    port: Optional[int] = typer.Option(
        None,
        "--port",
        "-p",
        help="Port to listen on (default: SERVICE_PORT or 8081).",
    ),
    pubsub_url: Optional[str] = typer.Option(
        None,
        "--pubsub-url",
        help="Base URL of the pub/sub service (default: PUBSUB_URL).",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging.",
    ),
):
    """
    Run the Chat Gateway.
    """
    # Overrides must land before the app module is imported
    if host:
        settings.host = host
    if port:
        settings.service_port = port
    if pubsub_url:
        settings.pubsub_url = pubsub_url
    if debug:
        settings.debug = True

    typer.echo(f"Chat Gateway listening on {settings.host}:{settings.service_port}")
    typer.echo(f"Relaying to {settings.pubsub_url}")

    uvicorn.run(
        "chat_gateway.main:app",
        host=settings.host,
        port=settings.service_port,
        log_level="debug" if settings.debug else "info",
    )


@app.command()
def version():
    """
    Show the Chat Gateway version.
    """
    from chat_gateway import __version__
    typer.echo(f"Chat Gateway v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
