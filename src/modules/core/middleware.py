"""Request correlation for the state endpoint.

Board clients send ``X-Request-ID`` with every load and save so a failed
save in a client log can be matched to the server's log lines.
"""

import re
import time
import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

logger = structlog.get_logger(__name__)

# Anything else is replaced: the value ends up verbatim in JSON log lines.
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def request_id_from(request: HttpRequest) -> str:
    """The client's request ID when usable, otherwise a fresh UUID4."""
    candidate = request.headers.get(CorrelationIdMiddleware.header, "").strip()
    if _VALID_REQUEST_ID.match(candidate):
        return candidate
    return str(uuid.uuid4())


class CorrelationIdMiddleware:
    """Binds ``correlation_id``, ``method`` and ``path`` for every log line
    of a request, logs one ``request_finished`` line with the status and
    duration, and echoes the ID back in ``X-Request-ID``.
    """

    header = "X-Request-ID"

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = request_id_from(request)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=cid, method=request.method, path=request.path
        )

        started = time.monotonic()
        try:
            response = self.get_response(request)
            logger.info(
                "request_finished",
                status_code=response.status_code,
                duration_ms=round((time.monotonic() - started) * 1000, 2),
            )
        finally:
            structlog.contextvars.clear_contextvars()

        response[self.header] = cid
        return response
