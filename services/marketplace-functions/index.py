"""
Main entry point for the marketplace functions.

This module serves as the central routing point for all endpoints. Clients
and configuration are built once per handler by `create_handler`, which tests
call with fake capabilities.
"""

import json
import logging
import os
import time

from capability_clients import Capabilities
from core.operations import build_operations
from core.pipeline import CapabilityInvoker, RequestDeadline, RequestPipeline
from core.routes import CALLABLE, HTTP, OperationDispatcher, handle_options
from core.routes.handlers import error_response
from core.utils.config import Settings, get_stage, load_settings
from core.utils.responses import parse_body
from structured_logger import StructuredLogger

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize structured logger for REQUEST/RESPONSE/ERROR lifecycle events
structured_logger = StructuredLogger(service_name="marketplace-functions")


# ============================================================================
# API ENDPOINT DEFINITIONS
# ============================================================================
#
# HTTP STYLE (body is the payload, failures are {"error": message}):
# ==================================================================
#
# 1. POST /extract-labels          (alias: POST /analyze-image)
#    - Requires: imageUrl
#    - Returns: labels
#
# 2. POST /generate-description
#    - Optional: productInfo (default "A new product")
#    - Returns: description
#
# 3. POST /generate-product-copy
#    - Optional: name, price, prompt, imageUrl
#    - Returns: description
#
# 4. POST /chat
#    - Optional: sessionId (default: current time in ms), text (default "Hello")
#    - Returns: reply
#
# 5. POST /chat-genai
#    - Optional: text
#    - Returns: reply
#
# 6. POST /save-record
#    - Requires: collection, data
#    - Returns: id, message
#
# 7. POST /generate-listing
#    - Requires: imageUrls (at least one), price
#    - Optional: language (default "english")
#    - Returns: success, data {title, region, description, features, price, language}
#
# CALLABLE STYLE:
# ===============
#
# POST /callable/{operation}
#    - Body: {"data": {...}}
#    - Returns: {"result": ...} or {"error": {"status": CODE, "message": ...}}
#
# UTILITY ENDPOINTS:
# ==================
#
# GET /health    - service status, stage and operations
# OPTIONS *      - CORS preflight
#
# ============================================================================


def create_handler(capabilities: Capabilities = None, settings: Settings = None):
    """
    Build a request handler bound to the given capabilities.

    Args:
        capabilities: External service adapters (real clients when omitted)
        settings: Configuration (read from the environment when omitted)

    Returns:
        handler(event, context) -> API Gateway style response
    """
    settings = settings or load_settings()
    capabilities = capabilities or Capabilities.from_settings(settings)

    invoker = CapabilityInvoker(
        timeout_s=settings.capability_timeout_s,
        max_retries=settings.capability_max_retries,
    )
    dispatcher = OperationDispatcher(
        build_operations(capabilities, settings),
        RequestPipeline(invoker),
        structured_logger,
    )
    logger.info(f"Handler ready - stage: {get_stage()}, operations: {sorted(dispatcher.operations)}")

    def handler(event, context=None):
        request_start_time = time.time()
        request_id = getattr(context, "aws_request_id", None) or "unknown"

        req_ctx = structured_logger.start_request(event)

        logger.info("=" * 80)
        logger.info(f"Invocation started - Request ID: {request_id}")
        logger.info(f"Event method: {event.get('httpMethod', 'UNKNOWN')}, path: {event.get('path', 'UNKNOWN')}")
        logger.debug(f"Full event: {json.dumps(event, default=str)[:1000]}")

        invocation = HTTP
        try:
            method = (event.get("httpMethod") or "GET").upper()
            path = (event.get("path") or "").rstrip("/")

            if method == "OPTIONS":
                return handle_options(structured_logger, req_ctx)

            segments = [segment for segment in path.strip("/").split("/") if segment]
            logger.debug(f"Path segments: {segments}")

            # Route: GET /health
            if method == "GET" and path.endswith("/health"):
                return dispatcher.handle_health(req_ctx)

            # Route: POST /callable/{operation}
            if method == "POST" and len(segments) == 2 and segments[0] == "callable":
                invocation = CALLABLE
                payload = parse_body(event)
                return dispatcher.handle_operation(
                    req_ctx, segments[1], payload,
                    invocation=CALLABLE,
                    deadline=RequestDeadline.from_context(context),
                )

            # Route: POST /{operation}
            if method == "POST" and len(segments) == 1:
                payload = parse_body(event)
                return dispatcher.handle_operation(
                    req_ctx, segments[0], payload,
                    invocation=HTTP,
                    deadline=RequestDeadline.from_context(context),
                )

            return dispatcher.handle_not_found(req_ctx, path, method)

        except ValueError as e:
            # Only body parsing raises here; pipeline failures are handled by the dispatcher
            structured_logger.log_error(req_ctx, e, status_code=400)
            return error_response(invocation, 400, "INVALID_ARGUMENT", str(e))
        except Exception as e:
            logger.error(f"Unhandled error: {e}", exc_info=True)
            structured_logger.log_error(req_ctx, e, status_code=500)
            return error_response(invocation, 500, "INTERNAL", "Internal error")
        finally:
            total_elapsed = time.time() - request_start_time
            logger.info(f"Invocation completed in {total_elapsed:.2f}s - Request ID: {request_id}")
            logger.info("=" * 80)

    return handler


lambda_handler = create_handler()
