"""
Body Size Limit Middleware

Rejects request bodies larger than the configured limit with 413. A declared
Content-Length is checked up front; streamed bodies (chunked transfer, no
Content-Length) are counted as they are received.
"""

import logging

from fastapi import HTTPException, status
from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send


logger = logging.getLogger(__name__)

TOO_LARGE_DETAIL = "Request body too large"


class BodySizeLimitMiddleware:
    """ASGI middleware enforcing a maximum request body size."""

    def __init__(self, app: ASGIApp, max_body_size: int) -> None:
        self.app = app
        self.max_body_size = max_body_size

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_body_size:
            logger.info("Rejected %s %s: Content-Length %s", scope["method"], scope["path"], content_length)
            await self._too_large(scope, receive, send)
            return

        received = 0
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_size:
                    logger.info("Rejected %s %s: body over %d bytes", scope["method"], scope["path"], self.max_body_size)
                    # FastAPI re-raises HTTPException from body parsing, so this becomes a 413
                    raise HTTPException(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        detail=TOO_LARGE_DETAIL,
                    )
            return message

        async def tracked_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, tracked_send)
        except HTTPException as e:
            # Body read outside the exception handlers
            if response_started or e.status_code != status.HTTP_413_REQUEST_ENTITY_TOO_LARGE:
                raise
            await self._too_large(scope, receive, send)

    @staticmethod
    async def _too_large(scope: Scope, receive: Receive, send: Send) -> None:
        response = JSONResponse(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            content={"detail": TOO_LARGE_DETAIL},
        )
        await response(scope, receive, send)
