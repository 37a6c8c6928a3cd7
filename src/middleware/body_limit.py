"""Reject request bodies larger than the configured cap."""

from starlette.datastructures import Headers
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from src.config.settings import Settings


class BodySizeLimitMiddleware:
    """Checks `Content-Length` up front; bodies without one are counted as they arrive."""

    def __init__(self, app: ASGIApp, settings: Settings):
        self.app = app
        self.max_bytes = settings.MAX_BODY_BYTES

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        length = Headers(scope=scope).get("content-length")
        if length is not None:
            try:
                too_large = int(length) > self.max_bytes
            except ValueError:
                await self._reject(scope, receive, send, 400, "validation_error", "Invalid Content-Length header")
                return
            if too_large:
                await self._reject_too_large(scope, receive, send)
                return
            await self.app(scope, receive, send)
            return

        # Chunked or otherwise unsized: buffer up to the cap, then replay
        body = bytearray()
        last: Message = {"type": "http.request", "body": b"", "more_body": False}
        while True:
            message = await receive()
            if message["type"] != "http.request":
                last = message
                break
            body.extend(message.get("body", b""))
            if len(body) > self.max_bytes:
                await self._reject_too_large(scope, receive, send)
                return
            if not message.get("more_body", False):
                break

        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                if last["type"] != "http.request":
                    return last
                return {"type": "http.request", "body": bytes(body), "more_body": False}
            return await receive()

        await self.app(scope, replay, send)

    async def _reject_too_large(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self._reject(
            scope, receive, send, 413, "payload_too_large",
            f"Request body exceeds {self.max_bytes} bytes",
        )

    @staticmethod
    async def _reject(scope: Scope, receive: Receive, send: Send, status: int, error_type: str, message: str) -> None:
        request = Request(scope)
        response = JSONResponse(
            status_code=status,
            content={
                "status": "error",
                "error": {
                    "type": error_type,
                    "message": message,
                    "request_id": getattr(request.state, "request_id", "unknown"),
                },
            },
        )
        await response(scope, receive, send)
