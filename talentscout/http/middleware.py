from __future__ import annotations

import logging
from secrets import token_urlsafe
import time

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from talentscout.logging_context import set_request_id
from talentscout.logging_utils import structured_log

REQUEST_ID_HEADER = "X-Request-ID"

logger = logging.getLogger(__name__)


def parse_skip_paths(raw_value: str) -> tuple[str, ...]:
    return tuple(filter(None, (part.strip() for part in raw_value.split(","))))


class RequestLoggingMiddleware:
    """Echoes or assigns ``X-Request-ID`` and logs one line per HTTP request.

    The id is exposed as ``scope["state"]["request_id"]`` (``request.state``)
    for response envelopes and as the logging context for the request's
    duration. Paths under ``skip_paths`` still get an id but no log line.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        log_requests: bool = True,
        skip_paths: tuple[str, ...] = (),
    ) -> None:
        self.app = app
        self._log_requests = log_requests
        self._skip_paths = tuple(path for path in skip_paths if path)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(REQUEST_ID_HEADER) or token_urlsafe(12)
        scope.setdefault("state", {})["request_id"] = request_id
        path = scope.get("path", "")
        method = scope.get("method", "")
        status_code: int | None = None
        started = time.perf_counter()

        async def send_with_request_id(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                MutableHeaders(scope=message)[REQUEST_ID_HEADER] = request_id
            await send(message)

        set_request_id(request_id)
        try:
            await self.app(scope, receive, send_with_request_id)
        except Exception:
            logger.exception(
                "request.failed",
                extra={"method": method, "path": path, "duration_ms": _elapsed_ms(started)},
            )
            raise
        else:
            if self._should_log(path):
                structured_log(
                    logger,
                    "warning" if (status_code or 0) >= 500 else "info",
                    "request.completed",
                    method=method,
                    path=path,
                    status_code=status_code,
                    duration_ms=_elapsed_ms(started),
                )
        finally:
            set_request_id(None)

    def _should_log(self, path: str) -> bool:
        return self._log_requests and not any(path.startswith(prefix) for prefix in self._skip_paths)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
