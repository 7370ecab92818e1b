"""
Capability Invoker - the single side-effecting call of a request.

Calls are fire-once unless retries are configured, and retries only ever apply
to idempotent capabilities. Every attempt runs under a bounded wait that is
clamped to the time the platform has left for the invocation.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Callable, Optional

from .errors import CapabilityError, CapabilityTimeout, PipelineError

logger = logging.getLogger(__name__)

# Time kept back from the platform deadline to write the response
DEADLINE_MARGIN_SECONDS = 1.0


class RequestDeadline:
    """Wall-clock budget for one request."""

    def __init__(self, remaining_s: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._expires_at = None if remaining_s is None else clock() + remaining_s

    @classmethod
    def from_context(cls, context: Any) -> "RequestDeadline":
        """Build a deadline from a Lambda-style context, or an unbounded one."""
        get_remaining = getattr(context, "get_remaining_time_in_millis", None)
        if not callable(get_remaining):
            return cls()
        try:
            remaining_ms = float(get_remaining())
        except (TypeError, ValueError):
            return cls()
        return cls(remaining_ms / 1000.0 - DEADLINE_MARGIN_SECONDS)

    def remaining(self) -> Optional[float]:
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0


class CapabilityInvoker:
    """
    Issues the outbound capability call for a pipeline.

    Args:
        timeout_s: Bounded wait per attempt
        max_retries: Extra attempts allowed for idempotent calls
    """

    def __init__(self, timeout_s: float = 60.0, max_retries: int = 0):
        self.timeout_s = timeout_s
        self.max_retries = max(0, max_retries)

    def invoke(
        self,
        capability: str,
        call: Callable[[], Any],
        idempotent: bool = True,
        deadline: Optional[RequestDeadline] = None,
    ) -> Any:
        """
        Run `call` and return its result.

        Raises:
            CapabilityError: On transport failure, timeout or an expired deadline
        """
        deadline = deadline or RequestDeadline()
        attempts = 1 + (self.max_retries if idempotent else 0)

        last_error: Optional[CapabilityError] = None
        for attempt in range(1, attempts + 1):
            if deadline.expired():
                logger.warning(f"[{capability}] Request deadline reached before attempt {attempt}, abandoning")
                raise last_error or CapabilityTimeout(capability, 0.0)

            timeout = self.timeout_s
            remaining = deadline.remaining()
            if remaining is not None:
                timeout = min(timeout, remaining)

            start_time = time.time()
            try:
                result = self._call_with_timeout(capability, call, timeout)
                elapsed = time.time() - start_time
                logger.info(f"[{capability}] Call succeeded in {elapsed:.2f}s (attempt {attempt}/{attempts})")
                return result
            except CapabilityTimeout as e:
                logger.error(f"[{capability}] Call timed out after {timeout:.1f}s (attempt {attempt}/{attempts})")
                last_error = e
            except PipelineError:
                raise
            except Exception as e:
                logger.error(f"[{capability}] Call failed (attempt {attempt}/{attempts}): {e}")
                last_error = CapabilityError(capability, cause=e)
                last_error.__cause__ = e

        raise last_error

    @staticmethod
    def _call_with_timeout(capability: str, call: Callable[[], Any], timeout_s: float) -> Any:
        # The worker is not joined on timeout; the call is abandoned, not cancelled remotely.
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"invoke-{capability}")
        future = executor.submit(call)
        try:
            return future.result(timeout=timeout_s)
        except FutureTimeoutError as e:
            future.cancel()
            raise CapabilityTimeout(capability, timeout_s) from e
        finally:
            executor.shutdown(wait=False)
