"""ASGI middleware setup: request body limit inside CORS."""
import logging

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from core.config import Settings

logger = logging.getLogger(__name__)


def payload_too_large_response(max_body_bytes: int) -> JSONResponse:
    limit_mb = max_body_bytes / (1024 * 1024)
    return JSONResponse(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        content={"error": "Payload too large", "message": f"The request body exceeds the {limit_mb:g}MB limit"},
    )


class BodySizeLimitMiddleware:
    """Reject request bodies larger than ``max_body_bytes`` with 413.

    The declared ``Content-Length`` is checked first; bodies without one
    (chunked uploads) are counted as they arrive and replayed to the app.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_body_bytes:
            await self._reject(scope, receive, send)
            return

        body = bytearray()
        while True:
            message = await receive()
            if message["type"] != "http.request":
                # Client went away before finishing the body.
                await self.app(scope, self._replay([message], receive), send)
                return
            body.extend(message.get("body", b""))
            if len(body) > self.max_body_bytes:
                await self._reject(scope, receive, send)
                return
            if not message.get("more_body", False):
                break

        buffered: Message = {"type": "http.request", "body": bytes(body), "more_body": False}
        await self.app(scope, self._replay([buffered], receive), send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send) -> None:
        logger.warning("Rejected %s %s: body over %d bytes", scope["method"], scope["path"], self.max_body_bytes)
        await payload_too_large_response(self.max_body_bytes)(scope, receive, send)

    @staticmethod
    def _replay(messages: list, receive: Receive) -> Receive:
        pending = list(messages)

        async def replay_receive() -> Message:
            if pending:
                return pending.pop(0)
            return await receive()

        return replay_receive


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    # Added first so CORS wraps it and 413 responses carry CORS headers.
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
