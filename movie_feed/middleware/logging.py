"""
Request context middleware.

For each request:
1. Reuses the caller's ``x-request-id`` or generates one
2. Binds request_id, method, path and client ip to the structlog context
3. Enforces the configured request timeout
4. Logs completion with status and duration
5. Echoes ``x-request-id`` on the response and clears the context
"""

import asyncio
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp

from ..logging_config import bind_context, clear_context, get_logger

REQUEST_ID_HEADER = 'x-request-id'

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, timeout: float = 30.0):
        super().__init__(app)
        self.timeout = timeout

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        bind_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            ip=request.client.host if request.client else 'unknown',
        )
        logger.debug('Request started')

        start_time = time.perf_counter()
        try:
            try:
                response = await asyncio.wait_for(call_next(request), timeout=self.timeout)
            except asyncio.TimeoutError:
                logger.warning('Request timed out', timeout=self.timeout)
                response = PlainTextResponse('request timed out', status_code=408)

            duration_ms = (time.perf_counter() - start_time) * 1000
            log_method = logger.info if response.status_code < 400 else logger.warning
            log_method(
                'Request completed',
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )

            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception as e:
            logger.exception('Request failed with exception', error=str(e))
            raise
        finally:
            clear_context()
