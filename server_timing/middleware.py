"""
Server-Timing middleware.

Binds a response handle and the deployment settings for every request so that
code running inside the request can submit timing entries, then copies the
collected entries onto the outgoing response. Optionally adds a `total` entry
covering the whole request.
"""

import logging
import time
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from server_timing.config import Settings, get_settings
from server_timing.entry import HEADER_NAME, TimingEntry
from server_timing.response import PendingResponse, bind_deployment, bind_response
from server_timing.timer import ServerTimer, timing

logger = logging.getLogger(__name__)


class ServerTimingMiddleware(BaseHTTPMiddleware):
    """
    Collect Server-Timing entries submitted while handling a request.

    Each entry becomes its own Server-Timing header on the response. The
    browser shows them in the DevTools Network tab under "Timing".
    """

    def __init__(
        self,
        app: ASGIApp,
        settings: Optional[Settings] = None,
        timer: Optional[ServerTimer] = None,
    ):
        super().__init__(app)
        self.settings = settings
        self.timer = timer or timing

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        settings = self.settings or get_settings()
        pending = PendingResponse()
        start_time = time.perf_counter()

        with bind_deployment(settings), bind_response(pending):
            try:
                response = await call_next(request)
            finally:
                entries = pending.commit()

            if settings.SERVER_TIMING_TOTAL and self.timer.is_enabled():
                # Calculate processing time in milliseconds
                process_time_ms = (time.perf_counter() - start_time) * 1000
                total = TimingEntry("total").set_duration(process_time_ms)
                total.set_parameter("desc", "Server Processing")
                entries.append((HEADER_NAME, total.header_value()))

        for name, value in entries:
            response.headers.append(name, value)

        if entries:
            logger.debug(f"Added {len(entries)} Server-Timing entries to {request.method} {request.url.path}")

        return response
