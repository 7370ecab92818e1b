import threading
from types import SimpleNamespace

import pytest

from core.pipeline import (
    CapabilityError,
    CapabilityInvoker,
    CapabilityTimeout,
    MalformedCapabilityOutput,
    RequestDeadline,
)


class FlakyCall:
    """Fails a fixed number of times, then returns a value."""

    def __init__(self, failures, result="ok"):
        self.failures = failures
        self.result = result
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise ConnectionError(f"attempt {self.calls} failed")
        return self.result


@pytest.fixture
def release():
    event = threading.Event()
    yield event
    event.set()


def test_success_calls_once():
    call = FlakyCall(failures=0)
    assert CapabilityInvoker(timeout_s=5).invoke("Image labeling", call) == "ok"
    assert call.calls == 1


def test_failure_is_wrapped_without_retries_by_default():
    call = FlakyCall(failures=1)
    with pytest.raises(CapabilityError) as exc_info:
        CapabilityInvoker(timeout_s=5).invoke("Image labeling", call)
    assert call.calls == 1
    assert exc_info.value.message == "Image labeling request failed"
    assert isinstance(exc_info.value.cause, ConnectionError)
    assert isinstance(exc_info.value.__cause__, ConnectionError)


def test_idempotent_call_is_retried():
    call = FlakyCall(failures=2)
    assert CapabilityInvoker(timeout_s=5, max_retries=2).invoke("Text generation", call) == "ok"
    assert call.calls == 3


def test_retries_are_bounded():
    call = FlakyCall(failures=5)
    with pytest.raises(CapabilityError):
        CapabilityInvoker(timeout_s=5, max_retries=2).invoke("Text generation", call)
    assert call.calls == 3


def test_non_idempotent_call_is_never_retried():
    call = FlakyCall(failures=1)
    with pytest.raises(CapabilityError):
        CapabilityInvoker(timeout_s=5, max_retries=3).invoke("Document store", call, idempotent=False)
    assert call.calls == 1


def test_pipeline_errors_pass_through_unretried():
    calls = []

    def call():
        calls.append(1)
        raise MalformedCapabilityOutput("Text generation", "bad")

    with pytest.raises(MalformedCapabilityOutput):
        CapabilityInvoker(timeout_s=5, max_retries=2).invoke("Text generation", call)
    assert len(calls) == 1


def test_slow_call_times_out(release):
    calls = []

    def call():
        calls.append(1)
        release.wait(5)
        return "late"

    with pytest.raises(CapabilityTimeout) as exc_info:
        CapabilityInvoker(timeout_s=0.05, max_retries=0).invoke("Text generation", call)
    assert exc_info.value.message == "Text generation request timed out"
    assert exc_info.value.http_status == 500
    assert len(calls) == 1


def test_timed_out_write_is_not_retried(release):
    calls = []

    def call():
        calls.append(1)
        release.wait(5)

    with pytest.raises(CapabilityTimeout):
        CapabilityInvoker(timeout_s=0.05, max_retries=3).invoke("Document store", call, idempotent=False)
    assert len(calls) == 1


def test_expired_deadline_skips_the_call():
    call = FlakyCall(failures=0)
    with pytest.raises(CapabilityTimeout):
        CapabilityInvoker(timeout_s=5).invoke("Image labeling", call, deadline=RequestDeadline(remaining_s=0))
    assert call.calls == 0


def test_deadline_clamps_the_wait(release):
    def call():
        release.wait(5)

    with pytest.raises(CapabilityTimeout) as exc_info:
        CapabilityInvoker(timeout_s=30).invoke("Image labeling", call, deadline=RequestDeadline(remaining_s=0.1))
    assert exc_info.value.timeout_s <= 0.1


def test_deadline_with_fake_clock():
    now = [100.0]
    deadline = RequestDeadline(remaining_s=2.0, clock=lambda: now[0])
    assert deadline.remaining() == 2.0
    assert not deadline.expired()
    now[0] = 103.0
    assert deadline.remaining() == 0.0
    assert deadline.expired()


def test_deadline_from_lambda_context():
    context = SimpleNamespace(get_remaining_time_in_millis=lambda: 5000)
    remaining = RequestDeadline.from_context(context).remaining()
    assert 3.9 < remaining <= 4.0


@pytest.mark.parametrize("context", [None, object(), SimpleNamespace(get_remaining_time_in_millis=lambda: None)])
def test_deadline_without_usable_context_is_unbounded(context):
    deadline = RequestDeadline.from_context(context)
    assert deadline.remaining() is None
    assert not deadline.expired()
