"""
Route handler functions for the function endpoints.

Every operation goes through the same boundary: run the pipeline, then turn
the outcome into an HTTP-style or callable-style response. Pipeline failures
map to their status; anything else is a generic 500 whose detail stays in the
logs.
"""

import logging
import time
from typing import Any, Dict, Mapping, Optional

from core.pipeline import Operation, PipelineError, RequestDeadline, RequestPipeline
from core.utils.config import get_stage
from core.utils.responses import (
    create_callable_error,
    create_callable_response,
    create_error_response,
    create_response,
)
from structured_logger import StructuredLogger

logger = logging.getLogger(__name__)

HTTP = "http"
CALLABLE = "callable"

INTERNAL_ERROR_MESSAGE = "Internal error"


def error_response(invocation: str, status_code: int, code: str, message: str) -> Dict[str, Any]:
    if invocation == CALLABLE:
        return create_callable_error(status_code, code, message)
    return create_error_response(status_code, message)


def handle_options(structured_logger: StructuredLogger, req_ctx: dict) -> Dict[str, Any]:
    """Handle OPTIONS (CORS preflight) requests."""
    logger.info("Handling OPTIONS request")
    response = create_response(200, {"ok": True})
    structured_logger.log_response(req_ctx, status_code=200)
    return response


class OperationDispatcher:
    """Routes operation names to pipelines and maps outcomes to responses."""

    def __init__(
        self,
        operations: Mapping[str, Operation],
        pipeline: RequestPipeline,
        structured_logger: StructuredLogger,
    ):
        self.operations = dict(operations)
        self.pipeline = pipeline
        self.structured_logger = structured_logger

    def handle_health(self, req_ctx: dict) -> Dict[str, Any]:
        """Handle health check requests."""
        logger.info("Processing health check request")
        status = {
            "status": "healthy",
            "stage": get_stage(),
            "operations": sorted(self.operations),
        }
        response = create_response(200, status)
        self.structured_logger.log_response(req_ctx, status_code=200)
        return response

    def handle_not_found(self, req_ctx: dict, path: str, method: str) -> Dict[str, Any]:
        self.structured_logger.log_warning(req_ctx, f"Endpoint not found - path: {path}, method: {method}", {
            "path": path,
            "method": method,
        })
        response = create_error_response(404, "Endpoint not found")
        self.structured_logger.log_response(req_ctx, status_code=404)
        return response

    def handle_operation(
        self,
        req_ctx: dict,
        name: str,
        payload: Any,
        invocation: str = HTTP,
        deadline: Optional[RequestDeadline] = None,
    ) -> Dict[str, Any]:
        """Run one operation and build its response."""
        operation = self.operations.get(name)
        if operation is None:
            return self.handle_not_found(req_ctx, name, "POST")

        if invocation == CALLABLE:
            payload = (payload or {}).get("data") or {}
            if not isinstance(payload, dict):
                error = ValueError("Callable data must be an object")
                self.structured_logger.log_error(req_ctx, error, status_code=400)
                return create_callable_error(400, "INVALID_ARGUMENT", "Request data must be an object")

        request_start_time = time.time()
        try:
            logger.info(f"Processing {name} request ({invocation}) - fields: {sorted(payload.keys())}")
            result = self.pipeline.run(operation, payload, deadline=deadline)
        except PipelineError as exc:
            elapsed = time.time() - request_start_time
            status_code = exc.http_status
            message = exc.message
            if status_code >= 500 and operation.failure_message:
                message = operation.failure_message
            logger.error(f"{name} failed after {elapsed:.2f}s - {type(exc).__name__}: {exc.message}")
            self.structured_logger.log_error(req_ctx, exc, status_code=status_code)
            return error_response(invocation, status_code, exc.code, message)
        except Exception as exc:
            elapsed = time.time() - request_start_time
            logger.error(f"Unexpected error in {name} after {elapsed:.2f}s: {exc}", exc_info=True)
            self.structured_logger.log_error(req_ctx, exc, status_code=500)
            return error_response(invocation, 500, "INTERNAL", operation.failure_message or INTERNAL_ERROR_MESSAGE)

        elapsed = time.time() - request_start_time
        logger.info(f"{name} request completed in {elapsed:.2f}s")
        self.structured_logger.log_metric(req_ctx, f"{name}.latency", int(elapsed * 1000), unit="Milliseconds")
        self.structured_logger.log_response(req_ctx, status_code=200)
        if invocation == CALLABLE:
            return create_callable_response(result)
        return create_response(200, result)
