# 📄 File: app/api/middleware/logging.py
# 🧭 Purpose (Layman Explanation):
# Writes a short diary line for every request that reaches the service: what was asked,
# how long it took, and whether it worked.
# 🧪 Purpose (Technical Summary):
# Starlette middleware that assigns a request id, binds it into the logging context for the
# duration of the request, and emits structured start/finish records with timing.
# 🔗 Dependencies:
# Starlette BaseHTTPMiddleware, app.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# app.main (middleware registration)

import time
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.shared.utils.logging import get_logger, log_context

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Request logging middleware for API monitoring.

    Authorization headers and bodies are never logged.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        with log_context(request_id=request_id):
            logger.debug(
                f"{request.method} {request.url.path} started",
                extra={'method': request.method, 'path': request.url.path}
            )
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    f"{request.method} {request.url.path} failed: {e}",
                    extra={
                        'method': request.method,
                        'path': request.url.path,
                        'duration_ms': round((time.perf_counter() - started) * 1000, 2),
                    },
                    exc_info=True
                )
                raise

            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms}ms)",
                extra={
                    'method': request.method,
                    'path': request.url.path,
                    'status_code': response.status_code,
                    'duration_ms': duration_ms,
                }
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
