"""
Structured Logger - one JSON line per request lifecycle event.

Cloud Logging parses JSON written to stdout, so each line carries a `severity`
alongside the request/correlation ids, operation and invocation style.

Usage:
    from structured_logger import StructuredLogger

    structured_logger = StructuredLogger(service_name="marketplace-functions")

    def handler(event, context):
        req_ctx = structured_logger.start_request(event)
        try:
            # ... your code ...
            structured_logger.log_response(req_ctx, status_code=200)
            return response
        except Exception as e:
            structured_logger.log_error(req_ctx, e, status_code=500)
            raise
"""

import json
import os
import random
import string
import time
import traceback
from datetime import datetime, timezone
from typing import Optional, Dict, Any

LOG_SCHEMA_VERSION = 1

CALLABLE_PREFIX = "/callable/"

SEVERITY = {
    "REQUEST": "INFO",
    "RESPONSE": "INFO",
    "ERROR": "ERROR",
    "WARNING": "WARNING",
    "METRIC": "INFO",
}


def detect_operation(path: str) -> Dict[str, Optional[str]]:
    """
    Split a request path into operation name and invocation style.

    /generate-listing            -> ("generate-listing", "http")
    /callable/generate-listing   -> ("generate-listing", "callable")
    """
    if not path or not isinstance(path, str):
        return {"operation": None, "invocation": None}

    normalized = path if path.startswith("/") else f"/{path}"
    normalized = normalized.rstrip("/")
    if normalized.startswith(CALLABLE_PREFIX):
        return {"operation": normalized[len(CALLABLE_PREFIX):] or None, "invocation": "callable"}

    operation = normalized.lstrip("/") or None
    return {"operation": operation, "invocation": "http"}


def _generate_id(prefix: str) -> str:
    random_suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{prefix}_{int(time.time() * 1000)}_{random_suffix}"


class StructuredLogger:
    """Emits lifecycle logs (REQUEST, RESPONSE, ERROR, WARNING, METRIC)."""

    def __init__(self, service_name: str = "marketplace-functions", stage: Optional[str] = None):
        self.service_name = service_name
        self.stage = stage or os.getenv("STAGE", "dev")

    def start_request(self, event: dict) -> dict:
        """
        Start tracking a request. Call this at the beginning of the handler.

        Returns:
            Request context dict to pass to the other log_* methods
        """
        request_context = event.get("requestContext") or {}
        headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}

        request_id = (
            request_context.get("requestId") or
            headers.get("x-request-id") or
            headers.get("function-execution-id") or
            _generate_id("req")
        )
        correlation_id = headers.get("x-correlation-id") or _generate_id("corr")

        method = event.get("httpMethod", "") or request_context.get("http", {}).get("method", "")
        path = event.get("path", "") or request_context.get("http", {}).get("path", "")
        route = detect_operation(path)

        context = {
            "request_id": request_id,
            "correlation_id": correlation_id,
            "method": method,
            "path": path,
            "operation": route["operation"],
            "invocation": route["invocation"],
            "start_time": time.time(),
        }

        self._emit("REQUEST", context)
        return context

    def log_response(self, ctx: dict, status_code: int = 200):
        """Log a completed response."""
        self._emit("RESPONSE", ctx, {
            "statusCode": status_code,
            "durationMs": self._duration_ms(ctx),
        })

    def log_error(self, ctx: dict, error: BaseException, status_code: int = 500):
        """
        Log a failed request. The stack trace stays in the log and is never
        returned to the caller.
        """
        stack_trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        if len(stack_trace) > 1000:
            stack_trace = stack_trace[-1000:]

        cause = error.__cause__
        self._emit("ERROR", ctx, {
            "statusCode": status_code,
            "durationMs": self._duration_ms(ctx),
            "error": {
                "message": str(error),
                "name": type(error).__name__,
                "code": getattr(error, "code", None),
                "cause": f"{type(cause).__name__}: {cause}" if cause else None,
                "stack": stack_trace,
            },
        })

    def log_warning(self, ctx: dict, message: str, details: Optional[Dict[str, Any]] = None):
        """Informational alert; does not terminate the request."""
        warning_data = {"message": message}
        if details:
            warning_data.update(details)
        self._emit("WARNING", ctx, {"warning": warning_data})

    def log_metric(self, ctx: dict, metric_name: str, value: float, unit: str = "Count"):
        self._emit("METRIC", ctx, {
            "metricName": metric_name,
            "value": value,
            "unit": unit,
        })

    @staticmethod
    def _duration_ms(ctx: dict) -> int:
        return int((time.time() - ctx.get("start_time", time.time())) * 1000)

    def _emit(self, log_type: str, ctx: dict, extra: Optional[Dict[str, Any]] = None):
        payload = {
            "schemaVersion": LOG_SCHEMA_VERSION,
            "logType": log_type,
            "severity": SEVERITY.get(log_type, "DEFAULT"),
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "serviceName": self.service_name,
            "stage": self.stage,
            "requestId": ctx.get("request_id"),
            "correlationId": ctx.get("correlation_id"),
            "method": ctx.get("method"),
            "operation": ctx.get("operation"),
            "invocation": ctx.get("invocation"),
        }
        if extra:
            payload.update(extra)

        print(json.dumps(payload, default=str))
