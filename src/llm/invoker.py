"""Resilient HTTP invocation of the model endpoint.

Every model call in the service goes through `invoke()`. It handles the
transport side of the lifecycle only:

  1. POST: Send the request body with a hard per-attempt timeout
  2. CLASSIFY: success / client_error / server_error / timeout / connection_error
  3. RETRY: Server errors, timeouts and connection errors back off and retry;
     client errors fail immediately

Parsing and validating what the model said is NOT this module's job, and
neither is retried here; see parser.py and validators.py.

Cancellation: if the calling task is cancelled, asyncio.CancelledError
propagates straight out of the in-flight request or backoff sleep, so no
further attempts are made.
"""

import asyncio
import time
from typing import Any, Awaitable, Callable, Optional

import httpx
from pydantic import BaseModel, ConfigDict

from src.llm.retry import AttemptOutcome, RetryPolicy, TransportAttempt, classify_status
from src.utils.logging import log, get_logger

MODULE = "llm.invoker"
logger = get_logger()

# How much of an error body to keep in messages and logs
ERROR_BODY_LIMIT = 500

Sleep = Callable[[float], Awaitable[None]]


class TransportError(Exception):
    """Raised when the endpoint could not be reached successfully.

    Carries the outcome of the last attempt plus every attempt made.
    """

    def __init__(
        self,
        message: str,
        outcome: AttemptOutcome,
        status_code: Optional[int] = None,
        attempts: Optional[list[TransportAttempt]] = None,
    ):
        super().__init__(message)
        self.outcome = outcome
        self.status_code = status_code
        self.attempts = attempts or []


class InvocationResult(BaseModel):
    """Successful response plus the attempts it took to get it."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    response: httpx.Response
    attempts: list[TransportAttempt]
    latency_ms: int = 0


def _excerpt(text: str) -> str:
    text = text.strip()
    if len(text) > ERROR_BODY_LIMIT:
        return text[:ERROR_BODY_LIMIT] + "..."
    return text


async def invoke(
    client: httpx.AsyncClient,
    url: str,
    body: dict[str, Any],
    *,
    policy: RetryPolicy,
    timeout_ms: int,
    headers: Optional[dict[str, str]] = None,
    sleep: Sleep = asyncio.sleep,
    activity_name: str = "invoke",
) -> InvocationResult:
    """POST `body` as JSON to `url`, retrying transient failures.

    Args:
        client: Shared async HTTP client (connection pool only, no state)
        url: Endpoint URL
        body: JSON request body
        policy: Retry/backoff policy
        timeout_ms: Hard wall-clock limit for each attempt
        headers: Extra request headers
        sleep: Awaitable used for backoff delays (seconds)
        activity_name: Name for logging context

    Returns:
        InvocationResult with the 2xx response

    Raises:
        TransportError: On a client error, or once retries are exhausted
    """
    timeout_s = timeout_ms / 1000
    attempts: list[TransportAttempt] = []
    started = time.monotonic()

    for attempt in range(policy.max_attempts):
        log.debug(logger, MODULE, "attempt_start",
                  f"Attempt {attempt + 1}/{policy.max_attempts} for {activity_name}",
                  attempt=attempt)
        t0 = time.monotonic()
        status_code: Optional[int] = None

        try:
            response = await asyncio.wait_for(
                client.post(url, json=body, headers=headers, timeout=timeout_s),
                timeout=timeout_s,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            outcome = AttemptOutcome.TIMEOUT
            detail = f"Request timed out after {timeout_ms}ms"
        except httpx.RequestError as e:
            outcome = AttemptOutcome.CONNECTION_ERROR
            detail = f"Connection error: {type(e).__name__}: {e}"
        else:
            status_code = response.status_code
            outcome = classify_status(status_code)
            if outcome is AttemptOutcome.SUCCESS:
                elapsed_ms = int((time.monotonic() - t0) * 1000)
                attempts.append(TransportAttempt(
                    index=attempt, elapsed_ms=elapsed_ms,
                    outcome=outcome, status_code=status_code,
                ))
                log.info(logger, MODULE, "attempt_done",
                         f"Request succeeded for {activity_name}",
                         attempt=attempt, outcome=outcome.value,
                         status_code=status_code, latency_ms=elapsed_ms)
                return InvocationResult(
                    response=response,
                    attempts=attempts,
                    latency_ms=int((time.monotonic() - started) * 1000),
                )
            kind = "Client" if outcome is AttemptOutcome.CLIENT_ERROR else "Server"
            detail = f"{kind} error: {status_code} - {_excerpt(response.text)}"

        elapsed_ms = int((time.monotonic() - t0) * 1000)
        attempts.append(TransportAttempt(
            index=attempt, elapsed_ms=elapsed_ms, outcome=outcome,
            status_code=status_code, detail=detail,
        ))
        log.warning(logger, MODULE, "attempt_failed",
                    f"Attempt failed for {activity_name}",
                    attempt=attempt, outcome=outcome.value,
                    status_code=status_code, latency_ms=elapsed_ms,
                    error=detail)

        if not policy.should_retry(outcome, attempt):
            break

        delay_ms = policy.backoff_ms(attempt)
        log.info(logger, MODULE, "attempt_retry",
                 f"Retrying {activity_name} in {delay_ms:.0f}ms",
                 attempt=attempt, delay_ms=delay_ms)
        await sleep(delay_ms / 1000)

    last = attempts[-1]
    log.error(logger, MODULE, "invoke_failed",
              f"Request failed for {activity_name} after {len(attempts)} attempt(s)",
              error=last.detail, outcome=last.outcome.value,
              status_code=last.status_code, attempts=len(attempts))
    raise TransportError(
        last.detail or "Request failed",
        outcome=last.outcome,
        status_code=last.status_code,
        attempts=attempts,
    )
