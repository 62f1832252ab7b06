# =============================================================================
# Import API - Request Body Limit
# =============================================================================
"""
ASGI middleware that caps the size of request bodies on selected paths.

The body is read before the application sees the request. A declared
Content-Length above the limit is refused without reading anything; a
streamed body is counted chunk by chunk and refused as soon as the total
passes the limit, so memory use never grows past the limit plus one chunk.
Accepted bodies are replayed to the application unchanged.
"""

from typing import Iterable, Optional

import structlog
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..errors import PayloadTooLarge


logger = structlog.get_logger(__name__)


def _route_path(scope: Scope) -> str:
    path = scope["path"]
    root_path = scope.get("root_path", "")
    if root_path and path.startswith(root_path):
        return path[len(root_path):] or "/"
    return path


def _declared_length(scope: Scope) -> Optional[int]:
    for name, value in scope.get("headers", []):
        if name == b"content-length":
            try:
                return int(value)
            except ValueError:
                return None
    return None


class BodySizeLimitMiddleware:
    """
    Reject request bodies larger than ``max_body_size`` bytes.

    Args:
        app: The wrapped ASGI application
        max_body_size: Largest accepted body, in bytes
        paths: Request paths the limit applies to; other paths pass through
    """

    def __init__(self, app: ASGIApp, max_body_size: int, paths: Iterable[str]) -> None:
        self.app = app
        self.max_body_size = max_body_size
        self.paths = frozenset(paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or _route_path(scope) not in self.paths:
            await self.app(scope, receive, send)
            return

        declared = _declared_length(scope)
        if declared is not None and declared > self.max_body_size:
            await self._reject(scope, receive, send, declared)
            return

        buffer = bytearray()
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            chunk = message.get("body", b"")
            if len(buffer) + len(chunk) > self.max_body_size:
                await self._reject(scope, receive, send, len(buffer) + len(chunk))
                return
            buffer += chunk
            more_body = message.get("more_body", False)

        body: Optional[bytes] = bytes(buffer)
        del buffer

        async def replay() -> Message:
            nonlocal body
            if body is not None:
                message = {"type": "http.request", "body": body, "more_body": False}
                body = None
                return message
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send, size: int) -> None:
        logger.warning(
            "request_body_too_large",
            path=scope["path"],
            size=size,
            limit=self.max_body_size,
        )
        error = PayloadTooLarge(f"Request body exceeds the limit of {self.max_body_size} bytes")
        response = JSONResponse(
            status_code=error.status_code,
            content=error.to_dict(),
            headers={"connection": "close"},
        )
        await response(scope, receive, send)
