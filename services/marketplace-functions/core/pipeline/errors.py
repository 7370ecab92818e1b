"""
Failure taxonomy for the request pipeline.

Each error carries the HTTP status and the callable status code it maps to,
plus a client-safe message. The underlying cause is chained for logging only.
"""

from typing import Optional


class PipelineError(Exception):
    """Base class for failures raised by a pipeline stage."""

    http_status = 500
    code = "INTERNAL"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingField(PipelineError):
    """A required inbound field is absent or empty."""

    http_status = 400
    code = "INVALID_ARGUMENT"

    def __init__(self, name: str, message: Optional[str] = None):
        super().__init__(message or f"Missing {name}")
        self.field_name = name


class CapabilityError(PipelineError):
    """Transport or remote failure while calling an external capability."""

    def __init__(self, capability: str, cause: Optional[BaseException] = None, message: Optional[str] = None):
        super().__init__(message or f"{capability} request failed")
        self.capability = capability
        self.cause = cause


class CapabilityTimeout(CapabilityError):
    """The capability did not answer within the bounded wait."""

    def __init__(self, capability: str, timeout_s: float):
        super().__init__(capability, message=f"{capability} request timed out")
        self.timeout_s = timeout_s


class MalformedCapabilityOutput(PipelineError):
    """The capability answered but its payload does not have the expected shape."""

    def __init__(self, capability: str, detail: str = ""):
        super().__init__(f"{capability} returned an unreadable response")
        self.capability = capability
        self.detail = detail


class WriteError(PipelineError):
    """The document store rejected or failed a write."""

    def __init__(self, collection: str, cause: Optional[BaseException] = None):
        super().__init__(f"Failed to save to {collection}")
        self.collection = collection
        self.cause = cause
