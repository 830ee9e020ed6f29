"""
CORS middleware for the browser chat frontend.

Starlette's CORSMiddleware only answers real preflight requests and only
adds the allow-origin header to simple responses. The frontend expects the
same three headers on every response and a bare 200 for any OPTIONS
request, so this is a small pure ASGI middleware instead. Being pure ASGI,
it leaves streaming bodies and the disconnect signal untouched.
"""
from starlette.datastructures import MutableHeaders
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class CORSHeadersMiddleware:
    """Add CORS headers to every HTTP response and short-circuit OPTIONS."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        if scope["method"] == "OPTIONS":
            response = Response(status_code=200, headers=CORS_HEADERS)
            await response(scope, receive, send)
            return

        async def send_with_cors(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in CORS_HEADERS.items():
                    headers[name] = value
            await send(message)

        await self.app(scope, receive, send_with_cors)
