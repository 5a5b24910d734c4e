import logging

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)


def _payload_too_large() -> JSONResponse:
    return JSONResponse(status_code=413, content={"error": "Payload too large"})


class BodySizeLimitMiddleware:
    """Rejects requests whose body exceeds ``max_bytes``.

    The declared ``Content-Length`` is checked up front; bodies without one
    (chunked uploads) are counted as they are read. Once the limit is passed
    the client gets a 413 and the application sees a disconnect.
    """

    def __init__(self, app: ASGIApp, max_bytes: int):
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        content_length = Headers(scope=scope).get("content-length")
        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                response = JSONResponse(status_code=400, content={"error": "Invalid input"})
                await response(scope, receive, send)
                return
            if declared > self.max_bytes:
                logger.warning(f"Rejected {scope['method']} {path}: body of {declared} bytes")
                await _payload_too_large()(scope, receive, send)
                return

        received = 0
        rejected = False
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received, rejected
            if rejected:
                return {"type": "http.disconnect"}
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    rejected = True
                    logger.warning(f"Rejected {scope['method']} {path}: body passed {self.max_bytes} bytes")
                    if not response_started:
                        await _payload_too_large()(scope, receive, send)
                    return {"type": "http.disconnect"}
            return message

        async def guarded_send(message: Message) -> None:
            nonlocal response_started
            # the 413 has already been sent
            if rejected:
                return
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, guarded_send)
        except Exception as e:
            if not rejected:
                raise
            logger.debug(f"Request aborted after oversized body: {type(e).__name__}")
