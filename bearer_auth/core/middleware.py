"""ASGI authentication middleware."""

import json

import structlog
from starlette.types import ASGIApp, Receive, Scope, Send

from bearer_auth.core.exceptions import AppException
from bearer_auth.core.path_matcher import is_skipped
from bearer_auth.core.request_parser import (
    ASGIScopeHeaderSource,
    parse_request_without_skip,
)
from bearer_auth.core.token_config import get_config

logger = structlog.get_logger()


class AuthMiddleware:
    """Pure ASGI middleware for bearer token validation (SSE-compatible).

    Skip paths come from the token configuration. Authenticated requests get
    ``identity`` and ``authenticated=True`` in ``request.state``; skipped
    requests get ``authenticated=False``.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        if scope.get("method", "") == "OPTIONS":
            await self.app(scope, receive, send)
            return

        config = get_config()
        state = scope.setdefault("state", {})
        if is_skipped(scope["path"], config.skip_paths):
            state["authenticated"] = False
            await self.app(scope, receive, send)
            return

        try:
            identity = parse_request_without_skip(ASGIScopeHeaderSource(scope), config)
        except AppException as exc:
            logger.info(
                "Request rejected",
                path=scope["path"],
                code=exc.code,
                status=exc.status_code,
            )
            await self._send_error(send, exc.status_code, exc.code, exc.message)
            return

        state["authenticated"] = True
        state["identity"] = identity

        await self.app(scope, receive, send)

    @staticmethod
    async def _send_error(send: Send, status: int, code: str, message: str) -> None:
        """Send a JSON error response directly."""
        content = {"status": status, "message": message, "code": code}
        body = json.dumps(content).encode()

        await send(
            {
                "type": "http.response.start",
                "status": status,
                "headers": [
                    [b"content-type", b"application/json"],
                    [b"www-authenticate", b"Bearer"],
                    [b"content-length", str(len(body)).encode()],
                ],
            }
        )
        await send({"type": "http.response.body", "body": body})
