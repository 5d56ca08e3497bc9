"""Read-path retry policy for the API client (tenacity)."""

from typing import Any, Awaitable, Callable

from tenacity import AsyncRetrying, RetryCallState, retry_if_result, stop_after_attempt, wait_incrementing

from api.utils.debug import print__client_debug
from editor.result import Err, Result

DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_DELAY = 0.5  # seconds; attempt n waits delay * n


def is_retryable(result: Any) -> bool:
    """Only network and server failures are worth another attempt."""
    return isinstance(result, Err) and result.retryable


def _log_retry(retry_state: RetryCallState) -> None:
    err = retry_state.outcome.result()
    print__client_debug(
        f"🔄 Retrying after {err.kind.value} error ({err.message}). "
        f"Attempt {retry_state.attempt_number} failed"
    )


def _last_result(retry_state: RetryCallState) -> Result:
    # Attempts exhausted: hand back the final Err instead of raising RetryError
    return retry_state.outcome.result()


async def retry_read(
    call: Callable[[], Awaitable[Result]],
    attempts: int = DEFAULT_RETRY_ATTEMPTS,
    delay: float = DEFAULT_RETRY_DELAY,
) -> Result:
    """Run ``call`` until it returns a non-retryable result or attempts run out."""
    retrying = AsyncRetrying(
        stop=stop_after_attempt(attempts),
        wait=wait_incrementing(start=delay, increment=delay),
        retry=retry_if_result(is_retryable),
        before_sleep=_log_retry,
        retry_error_callback=_last_result,
    )
    return await retrying(call)
