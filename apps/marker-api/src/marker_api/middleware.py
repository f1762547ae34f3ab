from __future__ import annotations

from contextvars import ContextVar
import logging
from time import perf_counter
from uuid import uuid4

from opentelemetry import trace
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

_trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="")


def set_trace_id(trace_id: str) -> None:
    _trace_id_ctx.set(trace_id)


def get_trace_id() -> str:
    return _trace_id_ctx.get()


class ObservabilityMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, service_name: str = "marker-api") -> None:
        super().__init__(app)
        self._tracer = trace.get_tracer(service_name)

    async def dispatch(self, request: Request, call_next) -> Response:
        trace_id = request.headers.get("x-trace-id") or str(uuid4())
        set_trace_id(trace_id)
        started = perf_counter()
        with self._tracer.start_as_current_span("http.request") as span:
            span.set_attribute("http.method", request.method)
            span.set_attribute("http.route", request.url.path)
            span.set_attribute("trace.id", trace_id)
            try:
                response = await call_next(request)
            except Exception:
                span.set_attribute("http.status_code", 500)
                self._log(request, 500, started, trace_id)
                raise
            span.set_attribute("http.status_code", response.status_code)

        response.headers["x-trace-id"] = trace_id
        self._log(request, response.status_code, started, trace_id)
        return response

    @staticmethod
    def _log(request: Request, status_code: int, started: float, trace_id: str) -> None:
        logger.info(
            "http_request",
            extra={
                "component": "marker_api",
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "duration_ms": round((perf_counter() - started) * 1000.0, 2),
                "trace_id": trace_id,
            },
        )
