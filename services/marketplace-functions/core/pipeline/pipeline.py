"""
Request Pipeline
================

Binds validator, request builder, capability call and normalizer for one
operation:

    payload -> validate -> build -> invoke -> normalize -> response

Stages raise PipelineError subclasses; mapping them to an envelope is the
dispatcher's job.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from pydantic import BaseModel

from .invoker import CapabilityInvoker, RequestDeadline

logger = logging.getLogger(__name__)


@dataclass
class Operation:
    """
    One externally addressable operation.

    Attributes:
        name: Operation name used for routing (e.g. "extract-labels")
        capability: Human-readable capability name for logs and errors
        validate: InboundRequest -> ValidatedRequest
        build: ValidatedRequest -> capability request
        call: capability request -> CapabilityResult (the outbound call)
        normalize: (CapabilityResult, ValidatedRequest) -> NormalizedResponse
        idempotent: Whether the call may be retried
        short_circuit: Optional ValidatedRequest -> response that skips the call
        on_call_error: Optional translation of a call failure (e.g. into WriteError)
        failure_message: Client-facing message for 500 failures, overriding the error's own
    """
    name: str
    capability: str
    validate: Callable[[Mapping[str, Any]], BaseModel]
    build: Callable[[BaseModel], Any]
    call: Callable[[Any], Any]
    normalize: Callable[[Any, BaseModel], Dict[str, Any]]
    idempotent: bool = True
    short_circuit: Optional[Callable[[BaseModel], Optional[Dict[str, Any]]]] = None
    on_call_error: Optional[Callable[[Exception, BaseModel], Exception]] = None
    failure_message: Optional[str] = None


class RequestPipeline:
    """Runs operations against an invoker. Holds no per-request state."""

    def __init__(self, invoker: CapabilityInvoker):
        self.invoker = invoker

    def run(
        self,
        operation: Operation,
        payload: Mapping[str, Any],
        deadline: Optional[RequestDeadline] = None,
    ) -> Dict[str, Any]:
        start_time = time.time()

        validated = operation.validate(payload)
        logger.debug(f"[{operation.name}] Validated request: {validated!r}")

        if operation.short_circuit:
            response = operation.short_circuit(validated)
            if response is not None:
                logger.info(f"[{operation.name}] Answered without calling {operation.capability}")
                return response

        request = operation.build(validated)

        try:
            result = self.invoker.invoke(
                operation.capability,
                lambda: operation.call(request),
                idempotent=operation.idempotent,
                deadline=deadline,
            )
        except Exception as e:
            if operation.on_call_error:
                raise operation.on_call_error(e, validated) from e
            raise

        response = operation.normalize(result, validated)
        elapsed = time.time() - start_time
        logger.info(f"[{operation.name}] Completed in {elapsed:.2f}s")
        return response
