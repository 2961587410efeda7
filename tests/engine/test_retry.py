from __future__ import annotations

from headline_crawler.config import RetryConfig
from headline_crawler.engine import RetryPolicy


def test_default_schedule() -> None:
    policy = RetryPolicy.from_config(RetryConfig())
    assert policy.max_attempts == 3
    assert policy.delay_for(1) == 0.5
    assert policy.delay_for(2) == 1.0
    assert policy.should_retry(1)
    assert policy.should_retry(2)
    assert not policy.should_retry(3)


def test_single_attempt_never_retries() -> None:
    policy = RetryPolicy(max_attempts=1, base_delay=2.0)
    assert not policy.should_retry(1)


def test_delay_doubles() -> None:
    policy = RetryPolicy(max_attempts=5, base_delay=0.25)
    assert [policy.delay_for(n) for n in range(1, 5)] == [0.25, 0.5, 1.0, 2.0]
