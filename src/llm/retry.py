"""Retry policy for calls to the model endpoint.

The policy is pure data plus arithmetic, so it can be tested without a
network: which attempt outcomes are worth another try, how many extra tries
are allowed, and how long to wait between them.

  attempt 0 fails → wait initial_delay_ms × 2^0 → attempt 1
  attempt 1 fails → wait initial_delay_ms × 2^1 → attempt 2
  ...

Client errors (4xx) are never retried: bad credentials or a malformed request
will fail the same way every time.
"""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class AttemptOutcome(str, Enum):
    """How a single transport attempt ended."""

    SUCCESS = "success"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    TIMEOUT = "timeout"
    CONNECTION_ERROR = "connection_error"


RETRYABLE_OUTCOMES = frozenset({
    AttemptOutcome.SERVER_ERROR,
    AttemptOutcome.TIMEOUT,
    AttemptOutcome.CONNECTION_ERROR,
})


def classify_status(status_code: int) -> AttemptOutcome:
    """Map an HTTP status code to an attempt outcome."""
    if 200 <= status_code < 300:
        return AttemptOutcome.SUCCESS
    if 400 <= status_code < 500:
        return AttemptOutcome.CLIENT_ERROR
    # 5xx, and anything else unexpected (1xx/3xx leaking through), is treated
    # as a server-side problem
    return AttemptOutcome.SERVER_ERROR


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff without jitter unless `jitter` is set.

    Args:
        max_retries: Extra attempts after the first one.
        initial_delay_ms: Delay after the first failed attempt.
        jitter: Fraction of the computed delay added at random (0.0 – 1.0).
        retryable: Outcomes that allow another attempt.
    """

    max_retries: int = 2
    initial_delay_ms: int = 1000
    jitter: float = 0.0
    retryable: frozenset = field(default=RETRYABLE_OUTCOMES)

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.initial_delay_ms < 0:
            raise ValueError("initial_delay_ms must be >= 0")
        if not 0.0 <= self.jitter <= 1.0:
            raise ValueError("jitter must be between 0 and 1")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def backoff_ms(self, attempt: int) -> float:
        """Delay to wait after failed attempt `attempt` (0-indexed)."""
        delay = self.initial_delay_ms * (2 ** attempt)
        if self.jitter:
            delay += delay * self.jitter * random.random()
        return delay

    def should_retry(self, outcome: AttemptOutcome, attempt: int) -> bool:
        """Whether another attempt follows a failed attempt `attempt`."""
        return outcome in self.retryable and attempt < self.max_retries


@dataclass(frozen=True)
class TransportAttempt:
    """Record of one network try. Only lives as long as the invocation."""

    index: int
    elapsed_ms: int
    outcome: AttemptOutcome
    status_code: Optional[int] = None
    detail: Optional[str] = None
