"""Tests for the retry policy (no network)."""

import pytest

from src.llm.retry import AttemptOutcome, RetryPolicy, classify_status


def test_backoff_doubles_from_initial_delay():
    policy = RetryPolicy(max_retries=3, initial_delay_ms=1000)
    assert [policy.backoff_ms(n) for n in range(4)] == [1000, 2000, 4000, 8000]


def test_backoff_jitter_stays_within_fraction():
    policy = RetryPolicy(initial_delay_ms=1000, jitter=0.5)
    for _ in range(50):
        assert 2000 <= policy.backoff_ms(1) <= 3000


def test_client_errors_never_retry():
    policy = RetryPolicy(max_retries=5)
    assert not policy.should_retry(AttemptOutcome.CLIENT_ERROR, 0)


def test_transient_outcomes_retry_until_budget_spent():
    policy = RetryPolicy(max_retries=2)
    for outcome in (AttemptOutcome.SERVER_ERROR, AttemptOutcome.TIMEOUT, AttemptOutcome.CONNECTION_ERROR):
        assert policy.should_retry(outcome, 0)
        assert policy.should_retry(outcome, 1)
        assert not policy.should_retry(outcome, 2)


def test_max_attempts_counts_first_try():
    assert RetryPolicy(max_retries=0).max_attempts == 1
    assert RetryPolicy(max_retries=3).max_attempts == 4


@pytest.mark.parametrize("status, outcome", [
    (200, AttemptOutcome.SUCCESS),
    (204, AttemptOutcome.SUCCESS),
    (400, AttemptOutcome.CLIENT_ERROR),
    (429, AttemptOutcome.CLIENT_ERROR),
    (499, AttemptOutcome.CLIENT_ERROR),
    (500, AttemptOutcome.SERVER_ERROR),
    (503, AttemptOutcome.SERVER_ERROR),
])
def test_classify_status(status, outcome):
    assert classify_status(status) is outcome


def test_rejects_negative_budget():
    with pytest.raises(ValueError):
        RetryPolicy(max_retries=-1)
    with pytest.raises(ValueError):
        RetryPolicy(jitter=1.5)
