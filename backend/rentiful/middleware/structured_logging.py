# backend/rentiful/middleware/structured_logging.py
from __future__ import annotations

import json
import logging
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..config import settings
from .request_id import get_request_id

log = logging.getLogger("rentiful.request")


def _json_log(payload: dict) -> None:
    # One JSON line per request.
    try:
        log.info(json.dumps(payload, default=str))
    except (TypeError, ValueError):
        log.info(str(payload))


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """
    Emits one structured log line per request with:
      request_id, method, path, status_code, latency_ms, user_sub

    Must run inside RequestIDMiddleware so the request id is already set.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        t0 = time.time()

        # Dev-mode header only; token subjects are resolved inside handlers.
        user_sub = request.headers.get(settings.dev_header_user_sub)

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            latency_ms = int((time.time() - t0) * 1000)

            _json_log(
                {
                    "event": "http_request",
                    "request_id": get_request_id(),
                    "method": request.method,
                    "path": request.url.path,
                    "query": str(request.url.query) if request.url.query else "",
                    "status_code": status_code,
                    "latency_ms": latency_ms,
                    "user_sub": user_sub,
                }
            )
