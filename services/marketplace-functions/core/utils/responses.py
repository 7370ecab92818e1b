"""
HTTP response utilities for the function entry point.
"""

import json
import logging
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization,X-Api-Key,X-Correlation-Id",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
}


def parse_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Parse request body from the function event.

    Args:
        event: API Gateway style event dictionary

    Returns:
        Parsed JSON body as dictionary, or empty dict if no body

    Raises:
        ValueError: If the body is not valid JSON or not a JSON object
    """
    body = event.get("body")
    if not body:
        return {}

    if isinstance(body, str):
        try:
            body = json.loads(body)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse JSON body: {str(e)}")
            raise ValueError("Invalid JSON in request body") from e

    if isinstance(body, dict):
        return body

    logger.warning(f"Unexpected body type: {type(body)}")
    raise ValueError("Request body must be a JSON object")


def create_response(
    status_code: int,
    body: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """
    Create an API Gateway style response.

    Args:
        status_code: HTTP status code
        body: Response body (will be JSON-serialized)
        headers: Optional response headers

    Returns:
        Response dictionary with statusCode, headers and body
    """
    response_headers = dict(DEFAULT_HEADERS)
    if headers:
        response_headers.update(headers)

    return {
        "statusCode": status_code,
        "headers": response_headers,
        "body": json.dumps(body, default=str, ensure_ascii=False),
    }


def create_error_response(status_code: int, message: str) -> Dict[str, Any]:
    """HTTP-style error envelope."""
    return create_response(status_code, {"error": message})


def create_callable_response(result: Dict[str, Any]) -> Dict[str, Any]:
    """Callable-style success envelope."""
    return create_response(200, {"result": result})


def create_callable_error(status_code: int, code: str, message: str) -> Dict[str, Any]:
    """Callable-style structured failure."""
    return create_response(status_code, {"error": {"status": code, "message": message}})
