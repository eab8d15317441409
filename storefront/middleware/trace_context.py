"""
W3C Trace Context Middleware
Every request gets a trace id, taken from the inbound traceparent header when
valid, so logs and responses of one request can be correlated.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional, Tuple

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

TRACEPARENT_PATTERN = re.compile(r"^00-([0-9a-f]{32})-([0-9a-f]{16})-([0-9a-f]{2})$")

trace_id_ctx: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)
span_id_ctx: ContextVar[Optional[str]] = ContextVar("span_id", default=None)


def get_trace_id() -> Optional[str]:
    """Get the trace ID of the request being served, if any"""
    return trace_id_ctx.get()


def get_span_id() -> Optional[str]:
    return span_id_ctx.get()


def parse_traceparent(traceparent: Optional[str]) -> Optional[Tuple[str, str, str]]:
    """
    Split a traceparent header into (trace_id, parent_span_id, flags).

    Returns None for malformed headers and for the all-zero ids the
    W3C Trace Context format declares invalid.
    """
    if not traceparent:
        return None

    match = TRACEPARENT_PATTERN.match(traceparent.strip().lower())
    if not match:
        return None

    trace_id, span_id, flags = match.groups()
    if trace_id == "0" * 32 or span_id == "0" * 16:
        return None
    return trace_id, span_id, flags


class TraceContextMiddleware(BaseHTTPMiddleware):
    """
    Binds trace context to the request and echoes it back.

    A fresh span id is minted for this service's hop; the inbound
    sampling flags are preserved.
    """

    async def dispatch(self, request: Request, call_next):
        parsed = parse_traceparent(request.headers.get("traceparent"))
        if parsed:
            trace_id, _, flags = parsed
        else:
            trace_id, flags = uuid.uuid4().hex, "01"
        span_id = uuid.uuid4().hex[:16]

        trace_token = trace_id_ctx.set(trace_id)
        span_token = span_id_ctx.set(span_id)
        request.state.trace_id = trace_id

        try:
            response = await call_next(request)
        finally:
            trace_id_ctx.reset(trace_token)
            span_id_ctx.reset(span_token)

        response.headers["traceparent"] = f"00-{trace_id}-{span_id}-{flags}"
        response.headers["X-Trace-ID"] = trace_id
        return response
