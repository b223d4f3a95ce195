"""Structured logging utilities and middleware for FastAPI.

Every log line is a JSON object with ``level`` and ``event`` keys plus
free-form fields, written to the ``oeradio`` logger.
"""

import json
import logging
import time
import uuid
from typing import Callable, Dict, Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


LOG = logging.getLogger("oeradio")
if not LOG.hasHandlers():
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(message)s")
    handler.setFormatter(formatter)
    LOG.addHandler(handler)
LOG.setLevel(logging.INFO)

REDACTED = "<redacted>"
SENSITIVE_HEADERS = frozenset({"authorization", "x-api-key", "cookie"})
# Personal names passed to the suggestion endpoint
SENSITIVE_PARAMS = frozenset({"name"})


def _emit(level: int, event: str, fields: Dict[str, object]) -> None:
    record = {"level": logging.getLevelName(level).lower(), "event": event, **fields}
    LOG.log(level, json.dumps(record, default=str))


def log_info(event: str, **kwargs: object) -> None:
    """Log an informational event as structured JSON."""
    _emit(logging.INFO, event, kwargs)


def log_warning(event: str, **kwargs: object) -> None:
    """Log a warning event as structured JSON."""
    _emit(logging.WARNING, event, kwargs)


def log_error(event: str, **kwargs: object) -> None:
    """Log an error event as structured JSON."""
    _emit(logging.ERROR, event, kwargs)


def _redact(items: Iterable, sensitive: frozenset) -> dict:
    return {k: REDACTED if k.lower() in sensitive else v for k, v in items}


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Structured HTTP request logging middleware.

    Auth headers and personal names in the query string are redacted.
    Request bodies (batch lookups and availability checks) are previewed
    up to ``max_body`` bytes. Server errors are logged at error level,
    client errors as warnings. Paths in ``quiet_paths`` are not logged.
    """

    def __init__(self, app, max_body: int = 512, quiet_paths: Iterable[str] = ("/health",)) -> None:
        super().__init__(app)
        self.max_body = max_body
        self.quiet_paths = frozenset(quiet_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self.quiet_paths:
            return await call_next(request)

        rid = request.headers.get("x-request-id", str(uuid.uuid4()))
        start = time.perf_counter()

        body_preview = ""
        if request.method == "POST":
            raw = await request.body()
            body_preview = raw[: self.max_body].decode("utf-8", errors="replace")

            async def receive() -> dict:
                return {"type": "http.request", "body": raw, "more_body": False}

            request._receive = receive  # Starlette internal, OK in middleware

        response = await call_next(request)

        fields = dict(
            request_id=rid,
            method=request.method,
            path=request.url.path,
            query=_redact(request.query_params.items(), SENSITIVE_PARAMS),
            headers=_redact(request.headers.items(), SENSITIVE_HEADERS),
            body_preview=body_preview,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000),
        )
        if response.status_code >= 500:
            log_error("http_request", **fields)
        elif response.status_code >= 400:
            log_warning("http_request", **fields)
        else:
            log_info("http_request", **fields)
        response.headers["x-request-id"] = rid
        return response
