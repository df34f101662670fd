"""
Tests for the exponential backoff decorator.
"""
import pytest

from globeplot.utils.exceptions import PermanentError, RateLimitError, TransientError
from globeplot.utils.retry import RetryConfig, retry_with_exponential_backoff


def _flaky(failures, error=TransientError("try again")):
    calls = {"count": 0}

    def func():
        calls["count"] += 1
        if calls["count"] <= failures:
            raise error
        return "ok"

    return func, calls


def test_succeeds_after_transient_failures():
    sleeps = []
    func, calls = _flaky(2)
    wrapped = retry_with_exponential_backoff(RetryConfig(max_attempts=3, base_delay=1.0, sleep=sleeps.append))(func)

    assert wrapped() == "ok"
    assert calls["count"] == 3
    assert sleeps == [1.0, 2.0]


def test_gives_up_after_max_attempts():
    func, calls = _flaky(5)
    wrapped = retry_with_exponential_backoff(RetryConfig(max_attempts=3, sleep=lambda s: None))(func)

    with pytest.raises(TransientError):
        wrapped()
    assert calls["count"] == 3


def test_permanent_errors_are_not_retried():
    func, calls = _flaky(1, PermanentError("bad input"))
    wrapped = retry_with_exponential_backoff(RetryConfig(sleep=lambda s: None))(func)

    with pytest.raises(PermanentError):
        wrapped()
    assert calls["count"] == 1


def test_delay_is_capped():
    config = RetryConfig(base_delay=1.0, max_delay=5.0)
    assert [config.delay_for(i, TransientError("x")) for i in range(5)] == [1.0, 2.0, 4.0, 5.0, 5.0]


def test_retry_after_overrides_backoff():
    config = RetryConfig(base_delay=1.0, max_delay=8.0)
    assert config.delay_for(0, RateLimitError("slow down", retry_after=4)) == 4.0
    assert config.delay_for(0, RateLimitError("slow down", retry_after=60)) == 8.0


def test_keyword_form_builds_config():
    wrapped = retry_with_exponential_backoff(max_attempts=5, base_delay=0.1)(lambda: "ok")
    assert wrapped.retry_config.max_attempts == 5
    assert wrapped.retry_config.base_delay == 0.1
    assert wrapped() == "ok"
